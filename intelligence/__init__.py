"""
Intelligence Module
Prompting, model gateway, response validation, fallback and the prediction pipeline
"""
from .schema import FieldKind, FieldSpec, OutputSchema
from .prompt_builder import PromptBuilder
from .retry import RetryPolicy, is_transient
from .gateway import ModelGateway, normalize_reply
from .validator import Invalid, ResponseValidator, Valid, extract_json_object, validate
from .fallback import FallbackSynthesizer
from .tasks import TASKS, PredictionTask, get_task
from .pipeline import PredictionPipeline, produce_prediction

__all__ = [
    "FieldKind",
    "FieldSpec",
    "OutputSchema",
    "PromptBuilder",
    "RetryPolicy",
    "is_transient",
    "ModelGateway",
    "normalize_reply",
    "Invalid",
    "ResponseValidator",
    "Valid",
    "extract_json_object",
    "validate",
    "FallbackSynthesizer",
    "TASKS",
    "PredictionTask",
    "get_task",
    "PredictionPipeline",
    "produce_prediction",
]
