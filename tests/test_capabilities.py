import pytest

from ddc_input.capabilities import INPUT_SELECT_CODE, Capabilities, Input, VcpCode


def test_input_values():
    assert INPUT_SELECT_CODE == 0x60
    assert [int(item) for item in Input] == [0x0F, 0x10, 0x11, 0x12]
    assert [str(item) for item in Input] == ["displayport-1", "displayport-2", "hdmi-1", "hdmi-2"]
    assert f"{Input.HDMI_2}" == "hdmi-2"


def test_from_value_round_trips():
    for item in Input:
        assert Input.from_value(int(item)) is item


@pytest.mark.parametrize("value", [0x00, 0x01, 0x0E, 0x13, 0x1F, 0xFF, 0x111])
def test_from_value_unknown(value):
    assert Input.from_value(value) is None


@pytest.mark.parametrize(
    "name, expected",
    [
        ("hdmi-1", Input.HDMI_1),
        ("HDMI-2", Input.HDMI_2),
        ("displayport-1", Input.DISPLAYPORT_1),
        ("0x10", Input.DISPLAYPORT_2),
        ("17", Input.HDMI_1),
    ],
)
def test_from_name(name, expected):
    assert Input.from_name(name) is expected


@pytest.mark.parametrize("name", ["vga-1", "0x01", "hdmi", ""])
def test_from_name_unknown(name):
    with pytest.raises(ValueError):
        Input.from_name(name)


def test_unmapped_values_are_dropped():
    caps = Capabilities(vcp=(VcpCode(0x60, (0x01, 0x12, 0x1F, 0x0F, 0x03)),))
    assert caps.supported_inputs() == [Input.HDMI_2, Input.DISPLAYPORT_1]


def test_declared_order_is_kept():
    caps = Capabilities(vcp=(VcpCode(0x60, (0x12, 0x11, 0x10, 0x0F)),))
    assert caps.supported_inputs() == [
        Input.HDMI_2,
        Input.HDMI_1,
        Input.DISPLAYPORT_2,
        Input.DISPLAYPORT_1,
    ]


def test_has_input_select():
    assert Capabilities(vcp=(VcpCode(0x10), VcpCode(0x60))).has_input_select()
    assert not Capabilities(vcp=(VcpCode(0x10),)).has_input_select()
    assert not Capabilities(vcp=()).has_input_select()
    assert not Capabilities(vcp=None).has_input_select()


def test_input_select_without_values():
    caps = Capabilities(vcp=(VcpCode(0x60),))
    assert caps.has_input_select()
    assert caps.supported_inputs() == []


def test_get():
    caps = Capabilities(vcp=(VcpCode(0x10), VcpCode(0x14, (0x05,))))
    assert caps.get(0x14) == VcpCode(0x14, (0x05,))
    assert caps.get(0x60) is None
    assert Capabilities().get(0x10) is None


def test_queries_do_not_mutate():
    caps = Capabilities(vcp=(VcpCode(0x60, (0x11, 0x00)),))
    before = Capabilities(vcp=(VcpCode(0x60, (0x11, 0x00)),))
    caps.supported_inputs()
    caps.has_input_select()
    assert caps == before
    with pytest.raises(AttributeError):
        caps.vcp = None


def test_vcp_code_equality_is_structural():
    assert VcpCode(0x14, (0x05, 0x08)) == VcpCode(0x14, (0x05, 0x08))
    assert VcpCode(0x14, (0x05, 0x08)) != VcpCode(0x14, (0x08, 0x05))
    assert VcpCode(0x14) != VcpCode(0x16)
