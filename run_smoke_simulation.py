"""
Stable fluids smoke simulation: headless run with diagnostics, or interactive viewer
"""

import argparse
import logging
import time
import numpy as np
import matplotlib.pyplot as plt
from stable_smoke.core.config import SimulationConfig
from stable_smoke.physics.simulation import Simulation
from stable_smoke.numerics.time_integration import SimulationDriver
from stable_smoke.utils.initial_conditions import (
    gaussian_puff,
    random_turbulence,
    taylor_green_vortex,
    vortex_pair
)
from stable_smoke.visualization.diagnostics import DiagnosticPlotter
from stable_smoke.visualization.flow_viz import FlowVisualizer

INITIAL_CONDITIONS = {
    'rest': None,
    'taylor-green': lambda n: taylor_green_vortex(n, amplitude=0.005),
    'turbulence': lambda n: random_turbulence(n, rng=np.random.default_rng(0)),
    'vortex-pair': lambda n: vortex_pair(n),
}


def stir(simulation: Simulation, step: int, radius: float = 8.0, period: int = 100):
    """Drag a rotor in a circle around the domain centre, like a mouse would"""
    n = simulation.n
    angle = 2 * np.pi * step / period
    x = n / 2 + radius * np.cos(angle)
    y = n / 2 + radius * np.sin(angle)

    # Force tangent to the circle, 0.1 magnitude as for a mouse drag
    simulation.inject_force(int(x), int(y), -0.1 * np.sin(angle), 0.1 * np.cos(angle))
    simulation.inject_density(int(x), int(y))


def run_headless(config: SimulationConfig, n_steps: int, stir_steps: int,
                 initial: str, output_every: int, show: bool):
    """Run the simulation without a window and report diagnostics"""

    print("=" * 70)
    print("STABLE FLUIDS SMOKE SIMULATION")
    print("=" * 70)

    simulation = Simulation(config)
    n = simulation.n
    print(f"Grid: {n}x{n}, dt={simulation.dt}, viscosity={simulation.viscosity}")

    make_velocity = INITIAL_CONDITIONS[initial]
    if make_velocity is not None:
        simulation.set_velocity(*make_velocity(n))
    simulation.set_density(gaussian_puff(n))

    diagnostics = DiagnosticPlotter()
    diagnostics.update(simulation)

    print("\nStep    Time     Energy      Max|v|     Density     Max|div|   Elapsed")
    print("-" * 75)

    start_time = time.time()

    def report(sim: Simulation):
        if sim.step_count <= stir_steps:
            stir(sim, sim.step_count)
        if sim.step_count % output_every == 0:
            diagnostics.update(sim)
            h = diagnostics.history
            print(f"{sim.step_count:5d}  {sim.time:6.2f}  {h['energy'][-1]:10.3e}  "
                  f"{h['max_velocity'][-1]:9.3e}  {h['total_density'][-1]:10.3f}  "
                  f"{h['max_divergence'][-1]:9.2e}  {time.time() - start_time:6.1f}s")

    driver = SimulationDriver(simulation, stop_on_irregular=True)
    try:
        driver.integrate(n_steps, output_every=output_every, callback=report)
    except KeyboardInterrupt:
        print("\nSimulation interrupted by user")

    elapsed = time.time() - start_time
    print("\n" + "=" * 75)
    print("SIMULATION COMPLETE")
    print(f"Total steps: {simulation.step_count}")
    print(f"Computation time: {elapsed:.1f} seconds")
    if elapsed > 0:
        print(f"Performance: {simulation.step_count / elapsed:.1f} steps/second")
    print(f"Regular: {simulation.is_regular()}")

    fig = diagnostics.plot_time_series()
    fig.savefig('smoke_diagnostics.png', dpi=150)
    print("\nDiagnostic plots saved to smoke_diagnostics.png")

    viz = FlowVisualizer(simulation)
    viz.draw_smoke = True
    viz.vector_dim_x = viz.vector_dim_y = max(1, n // 2)
    ax = viz.render()
    ax.figure.savefig(f'smoke_state_step{simulation.step_count}.png', dpi=150)
    print(f"Final state visualization saved to smoke_state_step{simulation.step_count}.png")

    if show:
        plt.show()


def main():
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument('--config', help='JSON file with simulation parameters')
    parser.add_argument('--grid-size', type=int, help='Cells per side')
    parser.add_argument('--dt', type=float, help='Time step')
    parser.add_argument('--viscosity', type=float, help='Fluid viscosity')
    parser.add_argument('--steps', type=int, default=500, help='Number of ticks (headless)')
    parser.add_argument('--stir-steps', type=int, default=200,
                        help='Ticks during which a rotor stirs the fluid (headless)')
    parser.add_argument('--initial', choices=sorted(INITIAL_CONDITIONS), default='rest')
    parser.add_argument('--output-every', type=int, default=25)
    parser.add_argument('--interactive', action='store_true', help='Open the interactive viewer')
    parser.add_argument('--show', action='store_true', help='Show plots after a headless run')
    parser.add_argument('--check-finite', action='store_true',
                        help='Warn when NaN/Inf appear in the fields')
    parser.add_argument('-v', '--verbose', action='store_true')
    args = parser.parse_args()

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO,
                        format='%(asctime)s %(name)s %(levelname)s: %(message)s')

    config = SimulationConfig.load(args.config) if args.config else SimulationConfig()
    if args.grid_size is not None:
        config.grid_size = args.grid_size
    if args.dt is not None:
        config.dt = args.dt
    if args.viscosity is not None:
        config.viscosity = args.viscosity
    if args.check_finite:
        config.check_finite = True

    if args.interactive:
        FlowVisualizer(Simulation(config)).run()
    else:
        run_headless(config, args.steps, args.stir_steps, args.initial,
                     args.output_every, args.show)


if __name__ == "__main__":
    main()
