"""Form schemas - configuration models for scan accuracy checking."""
from .enums import FieldKind, FieldCategory, DEGENERATE_VALUES, CATEGORICAL_WEIGHT, DEFAULT_ID_WIDTH
from .form_config import BubbleOption, FieldSpec, FormConfig, load_form_config, DEFAULT_CONFIG_PATH

__all__ = [
    # Enums
    "FieldKind",
    "FieldCategory",
    "DEGENERATE_VALUES",
    "CATEGORICAL_WEIGHT",
    "DEFAULT_ID_WIDTH",
    # Configuration
    "BubbleOption",
    "FieldSpec",
    "FormConfig",
    "load_form_config",
    "DEFAULT_CONFIG_PATH",
]
