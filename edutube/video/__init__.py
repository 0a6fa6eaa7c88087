from .embed import extract_youtube_id, get_embed_url


__all__ = ["extract_youtube_id", "get_embed_url"]
