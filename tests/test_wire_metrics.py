"""
Test: Wire metrics (display-only branch current/voltage/resistance).
"""
import pytest


def test_direct_wire_metrics():
    from ecegrid import Network, House, Wire, wire_key

    net = Network()
    net, h = House(net)
    net, _ = Wire(net, net.gen, h)

    sim = net.compile()
    state = sim.step(sim.init(), 1 / 60)

    reading = state.wires[wire_key("GEN", h.id)]
    v_house = 12.0 * 18.0 / 18.03
    assert reading.ohms == pytest.approx(0.03)
    assert reading.voltage == pytest.approx(12.0 - v_house, rel=1e-3)
    # All the wire current goes into the house
    assert reading.current == pytest.approx(v_house / 18.0, rel=1e-3)


def test_wire_key_is_unordered():
    from ecegrid import wire_key

    assert wire_key("GEN", "H0") == wire_key("H0", "GEN")
    assert wire_key(1, "a") == wire_key("a", 1)


def test_wire_reading_orientation_follows_caller():
    from ecegrid import Network, House, Wire

    net = Network()
    net, h = House(net)
    net, _ = Wire(net, net.gen, h)

    sim = net.compile()
    state = sim.step(sim.init(), 1 / 60)

    forward = sim.wire(state, net.gen, h)
    backward = sim.wire(state, h, net.gen)
    assert forward.current > 0
    assert backward.current == -forward.current
    assert backward.voltage == -forward.voltage
    assert backward.ohms == forward.ohms


def test_orientation_of_reversed_wire():
    """A wire placed house -> gen still reports positive current gen -> house."""
    from ecegrid import Network, House, Res, Wire, wire_key

    net = Network()
    net, h = House(net)
    net, r = Res(net, ohms=1.0)
    net, _ = Wire(net, h, net.gen)
    net, _ = Wire(net, r, h)

    sim = net.compile()
    state = sim.step(sim.init(), 1 / 60)

    stored = state.wires[wire_key("GEN", h.id)]
    assert stored.current < 0  # stored as (house, gen)
    assert sim.wire(state, net.gen, h).current == -stored.current
    assert sim.wire(state, h, net.gen) == stored
    assert sim.wire(state, net.gen, r) is None


def test_resistor_wires_report_per_endpoint_resistance():
    from ecegrid import Network, Res, House, Wire

    net = Network()
    net, r = Res(net, ohms=2.0)
    net, h = House(net)
    net, _ = Wire(net, net.gen, r)
    net, _ = Wire(net, r, h)

    sim = net.compile()
    state = sim.step(sim.init(), 1 / 60)

    upstream = sim.wire(state, net.gen, r)
    downstream = sim.wire(state, r, h)
    assert upstream.ohms == pytest.approx(2.03)
    assert downstream.ohms == pytest.approx(2.03)
    # Series branch: same current on both sides
    assert upstream.current == pytest.approx(downstream.current, rel=1e-3)


def test_kirchhoff_current_at_junction():
    from ecegrid import Network, Res, House, LED, Wire

    net = Network()
    net, r = Res(net, ohms=1.0)
    net, h = House(net)
    net, led = LED(net)
    net, _ = Wire(net, net.gen, r)
    net, _ = Wire(net, r, h)
    net, _ = Wire(net, r, led)

    sim = net.compile()
    state = sim.step(sim.init(), 1 / 60)

    i_in = sim.wire(state, net.gen, r).current
    i_out = sim.wire(state, r, h).current + sim.wire(state, r, led).current
    assert i_in == pytest.approx(i_out, rel=1e-3)
    assert i_out == pytest.approx(sim.load(state, h).current + sim.load(state, led).current, rel=1e-3)


def test_floating_wire_has_zero_current():
    from ecegrid import Network, House, Res, Wire

    net = Network()
    net, h = House(net)
    net, r = Res(net)
    net, _ = Wire(net, h, r)

    sim = net.compile()
    reading = sim.wire(sim.step(sim.init(), 1 / 60), h, r)
    assert reading.current == 0.0
    assert reading.voltage == 0.0


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
