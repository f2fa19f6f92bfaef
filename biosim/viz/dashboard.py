"""Matplotlib dashboard: population curves and density maps."""

from __future__ import annotations

import os
from typing import Optional

import matplotlib.pyplot as plt

from biosim.core.config import CARNIVORE, DASHBOARD_UPDATE_INTERVAL, HERBIVORE


class Dashboard:
    """Real-time dashboard with 4 subplots updating during simulation."""

    def __init__(self, island: "Island") -> None:  # noqa: F821
        self.island = island
        self._initialized = False
        self._fig = None
        self._axes = None
        self._update_counter = 0
        self._colorbars: dict = {}

    def initialize(self, interactive: bool = True) -> None:
        """Set up the matplotlib figure and subplots."""
        if interactive:
            plt.switch_backend("TkAgg")
            plt.ion()
        self._fig, axes = plt.subplots(2, 2, figsize=(13, 9))
        self._fig.suptitle("Island Simulation Dashboard", fontsize=14)
        self._axes = {
            "population": axes[0, 0],
            "fitness": axes[0, 1],
            "herbivores": axes[1, 0],
            "carnivores": axes[1, 1],
        }
        self._initialized = True
        if interactive:
            plt.pause(0.01)

    def update(self, year: int, metrics: "MetricsCollector", force: bool = False) -> None:  # noqa: F821
        """Update the dashboard with latest metrics."""
        self._update_counter += 1
        if not force and self._update_counter % DASHBOARD_UPDATE_INTERVAL != 0:
            return

        if not self._initialized:
            self.initialize()

        snapshots = metrics.snapshots
        if not snapshots:
            return

        years = [s.year for s in snapshots]

        ax = self._axes["population"]
        ax.clear()
        _plot_population(ax, years, snapshots)

        ax = self._axes["fitness"]
        ax.clear()
        ax.set_title("Average Fitness")
        ax.plot(years, [s.avg_herbivore_fitness for s in snapshots], "g-", label=HERBIVORE, linewidth=1.5)
        ax.plot(years, [s.avg_carnivore_fitness for s in snapshots], "r-", label=CARNIVORE, linewidth=1.5)
        ax.set_ylim(0, 1)
        ax.legend(fontsize=8)
        ax.grid(True, alpha=0.3)

        for species, cmap in ((HERBIVORE, "Greens"), (CARNIVORE, "Reds")):
            key = species.lower() + "s"
            old = self._colorbars.pop(key, None)
            if old is not None:
                old.remove()
            self._colorbars[key] = _plot_density(
                self._fig, self._axes[key], self.island.density_grid(species),
                f"{species} density", cmap,
            )

        self._fig.suptitle(f"Island Simulation - Year {year}", fontsize=14)
        self._fig.tight_layout()
        if plt.isinteractive():
            plt.pause(0.01)

    def save(self, filepath: str) -> None:
        """Save the current dashboard as an image."""
        if self._fig:
            self._fig.savefig(filepath, dpi=150, bbox_inches="tight")

    def close(self) -> None:
        """Close the dashboard."""
        if self._fig:
            plt.close(self._fig)
            self._fig = None
            self._initialized = False
            self._colorbars.clear()

    # ------------------------------------------------------------------
    # Post-hoc static plots
    # ------------------------------------------------------------------

    @staticmethod
    def comprehensive_report(
        metrics: "MetricsCollector",  # noqa: F821
        output_dir: str,
        island: Optional["Island"] = None,  # noqa: F821
    ) -> list[str]:
        """Generate all plots and save to output directory. Returns the file paths."""
        os.makedirs(output_dir, exist_ok=True)

        snapshots = metrics.snapshots
        if not snapshots:
            return []

        years = [s.year for s in snapshots]
        paths: list[str] = []

        def save(fig, name: str) -> None:
            path = os.path.join(output_dir, name)
            fig.savefig(path, dpi=150)
            plt.close(fig)
            paths.append(path)

        # Population over time
        fig, ax = plt.subplots(figsize=(10, 5))
        _plot_population(ax, years, snapshots)
        ax.set_xlabel("Year")
        save(fig, "population.png")

        # Births and deaths
        fig, ax = plt.subplots(figsize=(10, 5))
        ax.plot(years, [s.herbivore_births for s in snapshots], "g-", label="Herbivore births")
        ax.plot(years, [s.herbivore_deaths for s in snapshots], "g--", label="Herbivore deaths")
        ax.plot(years, [s.carnivore_births for s in snapshots], "r-", label="Carnivore births")
        ax.plot(years, [s.carnivore_deaths for s in snapshots], "r--", label="Carnivore deaths")
        ax.plot(years, [s.kills for s in snapshots], "k:", label="Kills")
        ax.set_title("Births and Deaths per Year")
        ax.set_xlabel("Year")
        ax.legend(fontsize=8)
        ax.grid(True, alpha=0.3)
        save(fig, "births_deaths.png")

        # Fitness and weight
        fig, (ax_fit, ax_w) = plt.subplots(1, 2, figsize=(14, 5))
        ax_fit.plot(years, [s.avg_herbivore_fitness for s in snapshots], "g-", label=HERBIVORE)
        ax_fit.plot(years, [s.avg_carnivore_fitness for s in snapshots], "r-", label=CARNIVORE)
        ax_fit.set_title("Average Fitness")
        ax_fit.set_ylim(0, 1)
        ax_w.plot(years, [s.avg_herbivore_weight for s in snapshots], "g-", label=HERBIVORE)
        ax_w.plot(years, [s.avg_carnivore_weight for s in snapshots], "r-", label=CARNIVORE)
        ax_w.set_title("Average Weight")
        for ax in (ax_fit, ax_w):
            ax.set_xlabel("Year")
            ax.legend(fontsize=8)
            ax.grid(True, alpha=0.3)
        save(fig, "fitness_weight.png")

        # Final distribution over the island
        if island is not None:
            fig, (ax_h, ax_c) = plt.subplots(1, 2, figsize=(14, 5))
            _plot_density(fig, ax_h, island.density_grid(HERBIVORE), f"{HERBIVORE} density", "Greens")
            _plot_density(fig, ax_c, island.density_grid(CARNIVORE), f"{CARNIVORE} density", "Reds")
            save(fig, "density.png")

        print(f"Reports saved to {output_dir}/")
        return paths


def _plot_population(ax, years: list[int], snapshots: list) -> None:
    ax.set_title("Population")
    ax.plot(years, [s.herbivores for s in snapshots], "g-", label=HERBIVORE, linewidth=1.5)
    ax.plot(years, [s.carnivores for s in snapshots], "r-", label=CARNIVORE, linewidth=1.5)
    ax.set_ylabel("Animals")
    ax.legend(fontsize=8)
    ax.grid(True, alpha=0.3)


def _plot_density(fig, ax, grid, title: str, cmap: str):
    """Heat map of animal counts per cell. Returns the colorbar."""
    ax.clear()
    ax.set_title(title)
    image = ax.imshow(grid, cmap=cmap, interpolation="nearest")
    ax.set_xticks(range(grid.shape[1]))
    ax.set_yticks(range(grid.shape[0]))
    return fig.colorbar(image, ax=ax, shrink=0.8)
