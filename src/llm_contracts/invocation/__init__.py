"""Model-invoked functions."""

from .runner import AiFunction, AiOptions, InvocationRunner, make_ai

__all__ = ["AiFunction", "AiOptions", "InvocationRunner", "make_ai"]
