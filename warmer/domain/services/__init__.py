from .permission_hash import permission_hash, variant_for_roles, variants_from_hashes

__all__ = ["permission_hash", "variant_for_roles", "variants_from_hashes"]
