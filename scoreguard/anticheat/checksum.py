import hashlib
import hmac
from ..models.data import Session

def _canonical_score(score) -> str:
    # 500 and 500.0 must sign identically
    if isinstance(score, float) and score.is_integer():
        return str(int(score))
    return str(score)

class ChecksumGenerator:
    """
    Binds a score to the session that produced it.

    HMAC-SHA256 keyed with a server secret over ``seed_userId_score``. The
    seed never leaves the server, so the digest deters forged submissions
    but is no stronger than the secrecy of the client bridge that is handed
    a checksum.
    """

    def __init__(self, secret: str, length: int = 16):
        self._key = secret.encode('utf-8')
        self.length = length

    def generate(self, session: Session, score) -> str:
        message = f"{session.checksum_seed}_{session.user_id}_{_canonical_score(score)}"
        digest = hmac.new(self._key, message.encode('utf-8'), hashlib.sha256).hexdigest()
        return digest[:self.length]

    def verify(self, session: Session, score, checksum: str) -> bool:
        expected = self.generate(session, score).encode('utf-8')
        return hmac.compare_digest(expected, str(checksum).encode('utf-8'))
