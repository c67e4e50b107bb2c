"""Structured recipe and meal plan generation."""

from kitchly.generate.generator import RecipeAndPlanGenerator, extract_json_text

__all__ = ["RecipeAndPlanGenerator", "extract_json_text"]
