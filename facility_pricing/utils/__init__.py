from .logger import setup_logging
from .hashing import sha256_hash, fingerprint
from .money import round_money, round_cents

__all__ = ["setup_logging", "sha256_hash", "fingerprint", "round_money", "round_cents"]
