"""
Example: Capacitor Charging
A capacitor hanging off a switched feeder, with a house behind it.

Demonstrates the backward-Euler companion model:
- Each tick the cap is a conductance G = C/dt_eff plus a source G*Vprev
- The node approaches the resistive divider value without overshoot
- cap_slow_factor stretches the curve over visible seconds
- Opening the switch isolates the cap and it discharges to 0

Components used: Trans, Cap, House, Wire
"""
import os

from ecegrid import Network, Trans, Cap, House, Wire, GridConfig


def build_cap_circuit(microfarads=220.0, config=None):
    """Build GEN ──[T]── CAP ── HOUSE."""
    config = config or GridConfig()
    net = Network()
    net, t = Trans(net, on=True)
    net, c = Cap(net, microfarads=microfarads, config=config)
    net, h = House(net)
    net, _ = Wire(net, net.gen, t)
    net, _ = Wire(net, t, c)
    net, _ = Wire(net, c, h)
    return net, {"switch": t, "cap": c, "house": h}


def simulate_charge(slow_factor=0.04, seconds=20.0, fps=60, microfarads=220.0):
    """Charge from 0V, then open the switch for the last quarter.

    Returns:
        times: Tick times (s)
        v_cap: Capacitor node voltage per tick
        levels: House level per tick
    """
    config = GridConfig(cap_slow_factor=slow_factor)
    net, nodes = build_cap_circuit(microfarads, config)
    dt = 1.0 / fps
    n_steps = int(seconds * fps)
    open_at = int(0.75 * n_steps)

    sim = net.compile(config)
    state = sim.init()

    times, v_cap, levels = [], [], []
    for i in range(n_steps):
        if i == open_at:
            net = net.toggle(nodes["switch"].id)
            sim = net.compile(config)
        state = sim.step(state, dt)
        times.append(state.time)
        v_cap.append(sim.v(state, nodes["cap"]))
        levels.append(sim.load(state, nodes["house"]).level.value)

    return times, v_cap, levels


def plot_charge(results, filename="capacitor_charging.png"):
    try:
        import matplotlib.pyplot as plt
    except ImportError:
        print("matplotlib not available, skipping plots")
        return

    fig, ax = plt.subplots(figsize=(10, 6))
    for slow_factor, (times, v_cap, _) in results.items():
        ax.plot(times, v_cap, label=f"slow factor {slow_factor}")
    ax.axhline(9.0, color="gray", linestyle="--", linewidth=0.8, label="house ON threshold")
    ax.set_xlabel("Time (s)")
    ax.set_ylabel("Capacitor voltage (V)")
    ax.set_title("Capacitor charge and discharge")
    ax.grid(True, alpha=0.3)
    ax.legend()

    script_dir = os.path.dirname(os.path.abspath(__file__))
    plt.savefig(os.path.join(script_dir, filename), dpi=150)
    plt.close()
    print(f"   Saved {filename}")


def main():
    print("=" * 60)
    print("Capacitor Charging Example")
    print("=" * 60)

    results = {}
    for slow_factor in (0.04, 0.2):
        times, v_cap, levels = simulate_charge(slow_factor=slow_factor)
        results[slow_factor] = (times, v_cap, levels)

        first_on = next((t for t, lvl in zip(times, levels) if lvl == "ON"), None)
        print(f"\nSlow factor {slow_factor}:")
        print(f"   Peak cap voltage: {max(v_cap):.3f} V")
        if first_on is None:
            print("   House never reached ON")
        else:
            print(f"   House ON after:   {first_on:.2f} s")
        print(f"   After isolation:  {v_cap[-1]:.3f} V")

    plot_charge(results)
    print("\n" + "=" * 60)


if __name__ == "__main__":
    main()
