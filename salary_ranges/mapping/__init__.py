from .aliases import AliasTable
from .families import ExecFamilyMap, FamilyLookup, matches_prefix

__all__ = ["AliasTable", "ExecFamilyMap", "FamilyLookup", "matches_prefix"]
