from scoreguard.anticheat import ChecksumGenerator
from scoreguard.models.data import Session


def _session(seed="abc123", user="u1"):
    return Session("sid", user, "snake", start_time=0, checksum_seed=seed)


def test_checksum_is_deterministic():
    gen = ChecksumGenerator("secret")
    assert gen.generate(_session(), 500) == gen.generate(_session(), 500)
    assert gen.generate(_session(), 500) == ChecksumGenerator("secret").generate(_session(), 500)


def test_each_input_changes_the_checksum():
    gen = ChecksumGenerator("secret")
    base = gen.generate(_session(), 500)
    assert gen.generate(_session(seed="other"), 500) != base
    assert gen.generate(_session(user="u2"), 500) != base
    assert gen.generate(_session(), 501) != base


def test_secret_changes_the_checksum():
    assert ChecksumGenerator("a").generate(_session(), 500) != ChecksumGenerator("b").generate(_session(), 500)


def test_integral_float_matches_int():
    gen = ChecksumGenerator("secret")
    assert gen.generate(_session(), 500.0) == gen.generate(_session(), 500)


def test_checksum_length():
    assert len(ChecksumGenerator("secret", length=12).generate(_session(), 1)) == 12


def test_verify():
    gen = ChecksumGenerator("secret")
    good = gen.generate(_session(), 42)
    assert gen.verify(_session(), 42, good)
    assert not gen.verify(_session(), 43, good)
    assert not gen.verify(_session(), 42, "ünïcode")
