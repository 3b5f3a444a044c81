from enum import Enum


class FeatureType(Enum):
    NOTE_ACTION = "note_action"
    EXPORT_HANDLER = "export_handler"


class FeatureState(Enum):
    STANDARD = "standard"
    EXPERIMENTAL = "experimental"


class Feature:
    """A capability a plugin contributes to the host."""

    def __init__(self, name, handler=None, feature_type=FeatureType.NOTE_ACTION,
                 state=FeatureState.STANDARD, meta=None):
        self.name = name
        self.handler = handler
        self.feature_type = feature_type
        self.state = state
        self.meta = dict(meta or {})

    @property
    def label(self):
        return self.meta.get("label", self.name)

    def __repr__(self):
        return f"Feature(name={self.name!r}, type={self.feature_type.value}, state={self.state.value})"
