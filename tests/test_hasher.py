#!/usr/bin/env python3

# Copyright (C) 2024 The ringsig developers
#
# This file is part of ringsig. It is subject to the license terms in the
# LICENSE file found in the top-level directory of this distribution.
#
# No part of ringsig including this file, may be copied, modified, propagated,
# or distributed except according to the terms contained in the LICENSE file.

"Tests for the `ringsig.hasher` module."

import hashlib
import itertools
from collections import Counter
from types import SimpleNamespace
from typing import List

import pytest
from btclib.ec.curve import CURVES

from ringsig.exceptions import PointNotOnCurve, RingSigValueError, UnsupportedHashInput
from ringsig.hasher import (
    PRESETS,
    SECP256K1_SHA256,
    SECP256R1_SHA256,
    SECP384R1_SHA384,
    HashEngine,
    point_on_curve,
    unbiased_index,
)

ec = CURVES["secp256k1"]
hasher = SECP256K1_SHA256


class LastByteSha256:
    "One byte hash function: the last byte of SHA256."

    digest_size = 1

    def __init__(self) -> None:
        self._h = hashlib.sha256()

    def update(self, data: bytes) -> None:
        self._h.update(data)

    def digest(self) -> bytes:
        return self._h.digest()[-1:]


def test_presets() -> None:
    assert PRESETS["secp256k1_sha256"] == SECP256K1_SHA256
    assert SECP256K1_SHA256.ec == CURVES["secp256k1"]
    assert SECP256K1_SHA256.hf == hashlib.sha256
    assert SECP256R1_SHA256.ec == CURVES["secp256r1"]
    assert SECP384R1_SHA384.hf == hashlib.sha384
    for preset in PRESETS.values():
        assert preset.hf().digest_size == preset.n_size

    assert HashEngine(CURVES["secp256k1"], hashlib.sha256) == SECP256K1_SHA256
    assert HashEngine(CURVES["secp256k1"], hashlib.sha3_256) != SECP256K1_SHA256
    assert SECP256R1_SHA256 != SECP256K1_SHA256


def test_size_mismatch() -> None:
    err_msg = "does not match the group order size"
    with pytest.raises(RingSigValueError, match=err_msg):
        HashEngine(CURVES["secp256k1"], hashlib.sha224)
    with pytest.raises(RingSigValueError, match=err_msg):
        HashEngine(CURVES["secp256k1"], hashlib.sha384)
    with pytest.raises(RingSigValueError, match=err_msg):
        HashEngine(CURVES["secp384r1"], hashlib.sha256)

    # validity check can be skipped
    HashEngine(CURVES["secp256k1"], hashlib.sha224, check_validity=False)


def test_hash_to_scalar() -> None:
    i = 91634880152443617534842621287039938041581081254914058002978601050179556493499
    assert hasher.hash_to_scalar("a") == i
    assert hasher.hash_to_scalar(b"a") == i
    assert i == int.from_bytes(hashlib.sha256(b"a").digest(), "big")


def test_hash_to_scalar_toy_group() -> None:
    # an order-200 group hashed with a one byte hash function
    toy_hasher = HashEngine(SimpleNamespace(n=200), LastByteSha256)  # type: ignore[arg-type]

    # the hash function itself
    assert toy_hasher.digest(b"a") == b"\xbb"  # 187
    assert toy_hasher.digest(b"0") == b"\xe9"  # 233
    assert toy_hasher.digest(b"\xe9") == b"\x0d"  # 13

    assert toy_hasher.hash_to_scalar("a") == 187
    # 233 is rejected, then hashed again
    assert toy_hasher.hash_to_scalar("0") == 13


def test_hash_to_scalar_small_order() -> None:
    # an order much smaller than the field prime, as for Curve25519
    n = 2**252 + 27742317777372353535851937790883648493
    toy_hasher = HashEngine(SimpleNamespace(n=n), hashlib.sha256)  # type: ignore[arg-type]

    for msg, i in (
        ("a", 2540419340017918842206596977616076347899655984737449402864777951274739517274),
        ("0", 6101368071810579765267267915524599990795450285408169461920255466208383520421),
    ):
        assert toy_hasher.hash_to_scalar(msg) == i
        # rejection sampling, not modular reduction
        assert i != int.from_bytes(hashlib.sha256(msg.encode()).digest(), "big") % n


def test_hash_sequence() -> None:
    i = 108327230196833505301150634709321652091196191739965401474258808571764922687322
    assert hasher.hash_sequence([1, 2, 3]) == i

    i = 9077136522292755305325573261332124424180056729600426071187952904380324423800
    assert hasher.hash_sequence(["a", "b", "c"]) == i
    assert hasher.hash_sequence([b"a", b"b", b"c"]) == i
    assert hasher.hash_sequence([bytearray(b"a"), "b", b"c"]) == i
    assert hasher.hash_to_scalar(bytearray(b"a")) == hasher.hash_to_scalar(b"a")

    i = 112151076631064605889327921696882492390839695314815668972759101076317607858646
    assert hasher.hash_sequence([ec.G, ec.G]) == i

    i = 43575008266016611275304127474943853239256831409985077531779052441823152705495
    assert hasher.hash_sequence([1, "a", ec.G]) == i

    # the hashed canonical DER representation
    G_hex = "0279be667ef9dcbbac55a06295ce870b07029bfcdb2dce28d959f2815b16f81798"
    seq = hasher.serialize_sequence([1, "a", ec.G])
    assert seq.hex() == "3029" + "020101" + "0c0161" + "0421" + G_hex
    assert hasher.hash_to_scalar(seq) == i

    assert hasher.serialize_sequence([]).hex() == "3000"
    assert hasher.serialize_sequence([-1]).hex() == "30030201ff"


def test_hash_sequence_unsupported() -> None:
    err_msg = "unsupported type: "
    for item in (1.1, [], {}, None, True, (1, 2, 3), (1, "a")):
        with pytest.raises(UnsupportedHashInput, match=err_msg):
            hasher.hash_sequence([item])  # type: ignore[list-item]
    # TypeError, as all UnsupportedHashInput
    with pytest.raises(TypeError):
        hasher.hash_sequence([1.1])  # type: ignore[list-item]

    # shaped as a point, but not on the curve
    with pytest.raises(PointNotOnCurve, match="point not on curve: "):
        hasher.hash_sequence([(1, 1)])
    # infinity point has no SEC 1 representation
    with pytest.raises(PointNotOnCurve, match="point not on curve: "):
        hasher.hash_sequence([(5, 0)])


def test_hash_to_point() -> None:
    H = (
        0x2BCB1A5B3C70421BFAC818F6BD13289A5C9A3CFB42D3B81F023A0276974C9245,
        0x0E465A0409B09A11894755E9B9D6E86938D1B5035587458AD29C00154DDFC9DE,
    )
    assert hasher.hash_to_point(ec.G) == H
    assert point_on_curve(H, ec)

    with pytest.raises(PointNotOnCurve, match="point not on curve: "):
        hasher.hash_to_point((1, 1))


def test_point_on_curve() -> None:
    assert point_on_curve(ec.G, ec)
    assert not point_on_curve((1, 1), ec)
    assert not point_on_curve((5, 0), ec)
    assert not point_on_curve((ec.G[0] + ec.p, ec.G[1]), ec)
    assert not point_on_curve((True, 1), ec)  # type: ignore[arg-type]
    assert not point_on_curve([ec.G[0], ec.G[1]], ec)  # type: ignore[arg-type]
    assert not point_on_curve((1, 2, 3), ec)  # type: ignore[arg-type]


def test_shuffle() -> None:
    items = [1, 2, 3, 4, 5, 6]
    assert hasher.shuffle(items, 1) == [6, 3, 4, 1, 5, 2]
    # deterministic, input untouched
    assert hasher.shuffle(items, 1) == [6, 3, 4, 1, 5, 2]
    assert items == [1, 2, 3, 4, 5, 6]

    assert hasher.shuffle([], 1) == []
    assert hasher.shuffle(["a"], 1) == ["a"]
    assert hasher.shuffle(items, 2) != hasher.shuffle(items, 1)
    assert sorted(hasher.shuffle(items, 2)) == items


def test_shuffle_reaches_all_permutations() -> None:
    items = [0, 1, 2]
    shuffled = {tuple(hasher.shuffle(items, seed)) for seed in range(120)}
    assert shuffled == set(itertools.permutations(items))


def test_unbiased_index() -> None:
    # exhaustive enumeration on small orders:
    # accepted values are equally distributed among all indexes
    for order in (200, 251, 256):
        for bound in range(1, order + 1):
            counts = [0] * bound
            for value in range(order):
                j = unbiased_index(value, bound, order)
                if j is not None:
                    assert 0 <= j < bound
                    counts[j] += 1
            assert counts == [order // bound] * bound

    # the incomplete last block is rejected
    assert unbiased_index(199, 3, 200) is None
    assert unbiased_index(198, 3, 200) is None
    assert unbiased_index(197, 3, 200) == 2
    assert unbiased_index(0, 1, 200) == 0


def test_shuffle_exhaustive_draws(monkeypatch: pytest.MonkeyPatch) -> None:
    # every sequence of accepted draws over a toy order:
    # each permutation must be obtained the same number of times
    order = 30
    toy_hasher = HashEngine(SimpleNamespace(n=order), LastByteSha256)  # type: ignore[arg-type]
    items = [0, 1, 2, 3]

    draws: List[int] = []
    hashed: List[List[int]] = []

    def scripted_hash_sequence(self: HashEngine, seq: List[int]) -> int:
        hashed.append(list(seq))
        return draws.pop(0)

    monkeypatch.setattr(HashEngine, "hash_sequence", scripted_hash_sequence)

    accepted = [
        [v for v in range(order) if unbiased_index(v, bound, order) is not None]
        for bound in (4, 3, 2)
    ]
    counts: Counter = Counter()
    for values in itertools.product(*accepted):
        # a rejected draw is skipped, consuming the counter
        draws[:] = [order - 1, *values]
        hashed.clear()
        counts[tuple(toy_hasher.shuffle(items, 7))] += 1
        assert hashed == [[7, counter] for counter in range(4)]
        assert not draws

    assert set(counts) == set(itertools.permutations(items))
    assert set(counts.values()) == {(order // 4) * (order // 3) * (order // 2)}


def test_shuffle_seeds_toy_order() -> None:
    # a one byte hash over an order-256 group: no scalar is ever rejected,
    # while the order byte size check would refuse the pairing
    ec_256 = SimpleNamespace(n=256)
    toy_hasher = HashEngine(ec_256, LastByteSha256, check_validity=False)  # type: ignore[arg-type]
    items = [0, 1, 2]

    n_seeds = 6000
    counts = Counter(tuple(toy_hasher.shuffle(items, seed)) for seed in range(n_seeds))
    assert set(counts) == set(itertools.permutations(items))
    expected = n_seeds // 6
    for count in counts.values():
        assert abs(count - expected) < expected // 5
