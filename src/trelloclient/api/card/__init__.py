from trelloclient.api.card.labels import Labels

__all__ = ["Labels"]
