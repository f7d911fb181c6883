from .producer_window import ProducerWindow

__all__ = ["ProducerWindow"]
