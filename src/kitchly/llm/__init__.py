"""Language model inference collaborator."""

from kitchly.llm.inference import InferenceClient, ModelSize, OpenAIInference, build_inference

__all__ = ["InferenceClient", "ModelSize", "OpenAIInference", "build_inference"]
