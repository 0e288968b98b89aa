"""
Example: Main Street
Generator feeding three houses, a dimmed LED and a transformer-fed block.

Demonstrates:
- Placement and wiring with auto-named nodes
- ON/DIM/OFF classification
- Toggling a street switch and re-solving
- The run check

Components used: House, LED, Res, Xfmr, Wire, Street
"""
from ecegrid import (
    Network,
    House,
    LED,
    Res,
    Xfmr,
    Wire,
    Street,
    street_power,
    run_check,
)


def build_town():
    """Build the demo town.

    Circuit:
        GEN ──[T]──┬── H1..H3          (main street)
            ──[R 57]── LED             (dim street light)
            ──[X 0.5]── H0             (low-voltage block)
    """
    net = Network()
    net, street = Street(net, net.gen, n_houses=3, prefix="main")

    net, r = Res(net, ohms=57.0, pos=(300, 420))
    net, led = LED(net, pos=(420, 420))
    net, _ = Wire(net, net.gen, r)
    net, _ = Wire(net, r, led)

    net, x = Xfmr(net, ratio=0.5, pos=(300, 150))
    net, h = House(net, pos=(420, 150))
    net, _ = Wire(net, net.gen, x)
    net, _ = Wire(net, x, h)

    return net, street, {"led": led, "xfmr": x, "block_house": h}


def report(net, dt=1 / 60):
    """Solve one tick and print every load."""
    sim = net.compile()
    state = sim.step(sim.init(), dt)

    for node_id, reading in state.loads.items():
        print(f"   {str(node_id):>10s}  V={reading.voltage:6.2f}V  "
              f"I={reading.current:5.2f}A  {reading.level.value}")

    result = run_check(net, state)
    print(f"   Run check: {result.message}")
    return state


def main():
    print("=" * 60)
    print("Main Street Example")
    print("=" * 60)

    net, street, _ = build_town()

    print("\n1. Everything switched on")
    print("-" * 40)
    report(net)

    print("\n2. Main street switched off")
    print("-" * 40)
    net = street_power(net, street, on=False)
    report(net)

    print("\n" + "=" * 60)


if __name__ == "__main__":
    main()
