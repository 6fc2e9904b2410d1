from shared.models.identity import Identity

__all__ = ["Identity"]
