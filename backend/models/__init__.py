from models.ayah import QuranAyah, SAJDA_TYPES

__all__ = ["QuranAyah", "SAJDA_TYPES"]
