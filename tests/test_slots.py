import pytest

from circuit.slots import (
    LIQUIDITY,
    SQRT_PRICE_X96,
    TICK,
    PackedField,
    Slot0State,
    decode_packed_field,
    decode_slot0,
    encode_slot0,
    pack_field,
)

SLOT0_WORD = 0x00010002D302D30140030DE900000000000056BAC52C49E2000000001151DBD7
LIQUIDITY_WORD = 0xF336F69B81B8268E


def test_decode_mainnet_slot0_tick(api):
    assert decode_packed_field(api, SLOT0_WORD, TICK) == 200169


def test_decode_mainnet_liquidity(api):
    assert decode_packed_field(api, LIQUIDITY_WORD, LIQUIDITY) == 17525466147715557006


@pytest.mark.parametrize("tick", [-887272, -200169, -1, 0, 1, 200169, 887272, TICK.min_value, TICK.max_value])
def test_tick_roundtrip(api, tick):
    word = pack_field(tick, TICK, SLOT0_WORD)
    assert decode_packed_field(api, word, TICK) == tick


def test_pack_leaves_other_fields_alone(api):
    word = pack_field(-5, TICK, SLOT0_WORD)
    assert decode_packed_field(api, word, SQRT_PRICE_X96) == decode_packed_field(api, SLOT0_WORD, SQRT_PRICE_X96)


def test_pack_rejects_out_of_range():
    with pytest.raises(ValueError):
        pack_field(1 << 23, TICK)
    with pytest.raises(ValueError):
        pack_field(-1, LIQUIDITY)


def test_packed_field_must_fit_word():
    with pytest.raises(ValueError):
        PackedField("bad", 250, 8)


def test_decode_slot0(api):
    state = decode_slot0(api, SLOT0_WORD)
    assert state.tick == 200169
    assert state.sqrt_price_x96 == 0x56BAC52C49E2000000001151DBD7
    assert state.observation_index == 0x0140
    assert state.observation_cardinality == 0x02D3
    assert state.observation_cardinality_next == 0x02D3
    assert state.fee_protocol == 0
    assert state.unlocked is True


def test_slot0_roundtrip(api):
    state = Slot0State(
        sqrt_price_x96=79228162514264337593543950336,
        tick=-276325,
        observation_index=7,
        observation_cardinality=100,
        observation_cardinality_next=100,
        fee_protocol=0x44,
        unlocked=False,
    )
    assert decode_slot0(api, encode_slot0(state)) == state
