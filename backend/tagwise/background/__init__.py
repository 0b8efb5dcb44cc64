from .suggestions import learn_tag_semantics, regenerate_content_suggestions

__all__ = [
    "regenerate_content_suggestions",
    "learn_tag_semantics",
]
