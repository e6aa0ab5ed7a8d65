"""
CaseVis Central Configuration
Contains the model asset location, viewer settings and data file overrides
"""

from dataclasses import dataclass, field
from typing import List, Optional
import os

import yaml


@dataclass
class ViewerConfig:
    """Configuration for the 3D body model viewer"""

    model_path: str = "assets/body_model.glb"
    height: int = 600

    # Highlight look
    emissive_intensity: float = 0.4

    # Seconds before the clicked-organ message clears
    message_timeout: float = 5.0

    # Camera
    camera_position: List[float] = field(default_factory=lambda: [0.0, 1.5, 200.0])
    camera_fov: float = 45.0
    background: str = "#282c34"


@dataclass
class TextConfig:
    """Configuration for the notes and summary views"""

    notes_height: int = 400
    mark_color: str = "yellow"


@dataclass
class CaseVisConfig:
    """Main configuration class combining all settings"""

    viewer: ViewerConfig
    text: TextConfig

    # Data overrides (None means the embedded defaults)
    case_file: Optional[str] = None
    mappings_file: Optional[str] = None

    # Logging
    log_level: str = "INFO"
    debug: bool = False

    def __init__(self,
                 viewer: Optional[ViewerConfig] = None,
                 text: Optional[TextConfig] = None):
        """Initialize with optional custom configurations"""
        self.viewer = viewer or ViewerConfig()
        self.text = text or TextConfig()
        self.case_file = None
        self.mappings_file = None
        self.log_level = "INFO"
        self.debug = False

        # Override with environment variables if present
        self._load_env_overrides()

    def _load_env_overrides(self):
        """Load configuration overrides from environment variables"""
        if os.getenv("CASEVIS_MODEL_PATH"):
            self.viewer.model_path = os.getenv("CASEVIS_MODEL_PATH")

        if os.getenv("CASEVIS_CASE_FILE"):
            self.case_file = os.getenv("CASEVIS_CASE_FILE")

        if os.getenv("CASEVIS_MAPPINGS_FILE"):
            self.mappings_file = os.getenv("CASEVIS_MAPPINGS_FILE")

        if os.getenv("CASEVIS_MESSAGE_TIMEOUT"):
            try:
                self.viewer.message_timeout = float(os.getenv("CASEVIS_MESSAGE_TIMEOUT"))
            except ValueError:
                raise ValueError(f"CASEVIS_MESSAGE_TIMEOUT must be a number, got {os.getenv('CASEVIS_MESSAGE_TIMEOUT')!r}")

        # Debug override
        if os.getenv("CASEVIS_DEBUG", "").lower() in ("true", "1", "yes"):
            self.debug = True
            self.log_level = "DEBUG"

    @classmethod
    def load_from_file(cls, config_path: str) -> 'CaseVisConfig':
        """Load configuration from YAML file"""
        try:
            with open(config_path, 'r') as f:
                config_data = yaml.safe_load(f) or {}

            viewer = ViewerConfig(**config_data.get('viewer', {}))
            text = TextConfig(**config_data.get('text', {}))

            config = cls(viewer=viewer, text=text)

            # Override other settings
            for key, value in config_data.items():
                if key not in ['viewer', 'text'] and hasattr(config, key):
                    setattr(config, key, value)

            return config

        except Exception as e:
            raise ValueError(f"Failed to load config from {config_path}: {e}")

    def save_to_file(self, config_path: str):
        """Save configuration to YAML file"""
        config_data = {
            'viewer': {
                'model_path': self.viewer.model_path,
                'height': self.viewer.height,
                'emissive_intensity': self.viewer.emissive_intensity,
                'message_timeout': self.viewer.message_timeout,
                'camera_position': list(self.viewer.camera_position),
                'camera_fov': self.viewer.camera_fov,
                'background': self.viewer.background
            },
            'text': {
                'notes_height': self.text.notes_height,
                'mark_color': self.text.mark_color
            },
            'case_file': self.case_file,
            'mappings_file': self.mappings_file,
            'log_level': self.log_level,
            'debug': self.debug
        }

        with open(config_path, 'w') as f:
            yaml.dump(config_data, f, default_flow_style=False, indent=2)


# Default global configuration instance
default_config = CaseVisConfig()
