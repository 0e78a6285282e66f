from anonymize_places.substitution.table import SubstitutionTable, random_alphanumeric

__all__ = ["SubstitutionTable", "random_alphanumeric"]
