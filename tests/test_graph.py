"""
Test: Conduction graph and reachability.

Edge resistance = wire + resistor endpoints + closed transistor endpoints.
Open transistors remove every wire touching them.
"""
import pytest


def test_edge_resistance_per_endpoint():
    from ecegrid import Network, Res, Trans, House, Wire, GridConfig
    from ecegrid.graph import build_adjacency

    cfg = GridConfig()
    net = Network()
    net, r = Res(net, ohms=2.0)
    net, t = Trans(net, on=True)
    net, h = House(net)
    net, _ = Wire(net, net.gen, r)
    net, _ = Wire(net, r, t)
    net, _ = Wire(net, t, h)

    adj = build_adjacency(net, cfg)
    ohms = {(net_id, e.to): e.ohms for net_id, edges in adj.items() for e in edges}

    assert ohms[("GEN", r.id)] == pytest.approx(0.03 + 2.0)
    assert ohms[(r.id, t.id)] == pytest.approx(0.03 + 2.0 + 0.5)
    assert ohms[(t.id, h.id)] == pytest.approx(0.03 + 0.5)
    # Symmetric
    for (a, b), value in ohms.items():
        assert ohms[(b, a)] == value


def test_open_switch_removes_edges():
    from ecegrid import Network, Trans, House, Wire, GridConfig
    from ecegrid.graph import build_adjacency, reachable_from

    net = Network()
    net, t = Trans(net, on=False)
    net, h = House(net)
    net, _ = Wire(net, net.gen, t)
    net, _ = Wire(net, t, h)

    adj = build_adjacency(net, GridConfig())
    assert adj["GEN"] == []
    assert adj[t.id] == []
    assert adj[h.id] == []
    assert reachable_from("GEN", adj) == {"GEN"}


def test_isolated_nodes_have_entries():
    from ecegrid import Network, LED, GridConfig
    from ecegrid.graph import build_adjacency

    net, led = LED(Network())
    adj = build_adjacency(net, GridConfig())
    assert adj[led.id] == []


def test_wire_to_missing_node_is_skipped():
    from ecegrid import Network, House, WireSpec, GridConfig
    from ecegrid.graph import build_adjacency

    net, h = House(Network())
    net = net._replace(wires=(WireSpec("GEN", "ghost"), WireSpec("GEN", h.id)))

    adj = build_adjacency(net, GridConfig())
    assert [e.to for e in adj["GEN"]] == [h.id]
    assert "ghost" not in adj


def test_reachability_excludes_floating_fragment():
    from ecegrid import Network, House, LED, Res, Wire, GridConfig
    from ecegrid.graph import build_adjacency, reachable_from

    net = Network()
    net, h = House(net)
    net, led = LED(net)
    net, r = Res(net)
    net, _ = Wire(net, net.gen, h)
    net, _ = Wire(net, led, r)  # not connected to the generator

    adj = build_adjacency(net, GridConfig())
    assert reachable_from("GEN", adj) == {"GEN", h.id}


def test_reachability_from_unknown_start():
    from ecegrid.graph import reachable_from

    assert reachable_from("GEN", {}) == set()


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
