"""
Test: Network construction and the placement boundary.

This validates:
- Functional building (old networks are never modified)
- Auto-generated ids
- Rejection of invalid parameters, self loops and duplicate wires
"""
import math
import pytest


def test_network_starts_with_generator():
    from ecegrid import Network, GenSpec, GEN_ID

    net = Network()
    assert net.gen.id == GEN_ID
    assert isinstance(net.gen.spec, GenSpec)
    assert len(net.nodes) == 1
    assert net.wires == ()


def test_auto_names_per_kind():
    from ecegrid import Network, House, LED, Res, Trans, Cap, Xfmr

    net = Network()
    net, h0 = House(net)
    net, h1 = House(net)
    net, l0 = LED(net)
    net, r0 = Res(net)
    net, t0 = Trans(net)
    net, c0 = Cap(net)
    net, x0 = Xfmr(net)

    assert [n.id for n in (h0, h1, l0, r0, t0, c0, x0)] == ["H0", "H1", "L0", "R0", "T0", "C0", "X0"]


def test_auto_name_skips_taken_id():
    from ecegrid import Network, House

    net = Network()
    net, _ = House(net, name="H1")
    net, h = House(net)
    assert h.id == "H2"


def test_integer_ids_are_allowed():
    from ecegrid import Network, House, Wire

    net = Network()
    net, h = House(net, name=7)
    net, w = Wire(net, net.gen, 7)
    assert h.id == 7
    assert (w.a, w.b) == ("GEN", 7)


def test_building_is_functional():
    from ecegrid import Network, House

    net0 = Network()
    net1, _ = House(net0)
    assert len(net0.nodes) == 1
    assert len(net1.nodes) == 2


def test_placement_defaults_from_config():
    from ecegrid import Network, Res, Cap, Xfmr, GridConfig

    cfg = GridConfig()
    net = Network()
    net, r = Res(net)
    net, c = Cap(net)
    net, x = Xfmr(net)

    assert r.spec.ohms == cfg.resistor_default_ohms
    assert x.spec.ratio == cfg.transformer_default_ratio
    # 220 uF scaled by the time factor
    assert c.spec.farads == pytest.approx(220e-6 * cfg.cap_time_scale)


def test_capacitance_uses_config_time_scale():
    from ecegrid import Network, Cap, GridConfig

    cfg = GridConfig(cap_time_scale=1.0)
    net, c = Cap(Network(), microfarads=100.0, config=cfg)
    assert c.spec.farads == pytest.approx(100e-6)


@pytest.mark.parametrize("bad", [0.0, -2.0, math.nan])
def test_invalid_parameters_rejected(bad):
    from ecegrid import Network, Res, Cap, Xfmr

    net = Network()
    with pytest.raises(ValueError):
        Res(net, ohms=bad)
    with pytest.raises(ValueError):
        Cap(net, microfarads=bad)
    with pytest.raises(ValueError):
        Xfmr(net, ratio=bad)


def test_wire_validation():
    from ecegrid import Network, House, Wire

    net = Network()
    net, h = House(net)
    net, _ = Wire(net, net.gen, h)

    with pytest.raises(ValueError):
        Wire(net, h, net.gen)  # same unordered pair
    with pytest.raises(ValueError):
        Wire(net, h, h)
    with pytest.raises(ValueError):
        Wire(net, h, "nowhere")


def test_duplicate_id_and_second_generator_rejected():
    from ecegrid import Network, Node, House, GenSpec

    net = Network()
    net, _ = House(net, name="A")
    with pytest.raises(ValueError):
        House(net, name="A")
    with pytest.raises(ValueError):
        net.add_node(Node("GEN2", GenSpec()))


def test_toggle_returns_new_network():
    from ecegrid import Network, Trans, House

    net = Network()
    net, t = Trans(net, on=True)
    net, h = House(net)

    off = net.toggle(t.id)
    assert off.get(t.id).spec.on is False
    assert net.get(t.id).spec.on is True
    assert off.toggle(t.id).get(t.id).spec.on is True

    with pytest.raises(ValueError):
        net.toggle(h.id)
    with pytest.raises(ValueError):
        net.set_switch("missing", True)


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
