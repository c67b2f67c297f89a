"""Visualization tools for the regression-to-the-mean demonstration."""

from typing import List, Tuple
import matplotlib.pyplot as plt
import pandas as pd
import seaborn as sns
from pathlib import Path

from ..simulator.core.data_structures import SimulationResult
from ..simulator.core.utils import need_column


class RegressionVisualizer:
    """
    Plots for a single pipeline run.

    Every plot method returns its figure open; callers close it with
    `plt.close(fig)` once saved or shown.

    Parameters
    ----------
    figure_size : Tuple[int, int], default=(10, 6)
        Default figure size for plots.
    dpi : int, default=150
        DPI for saved figures.
    style : str, default='seaborn-v0_8-whitegrid'
        Matplotlib style to use.
    colors : List[str], optional
        Colors for population, cohort / control, treatment.
    """

    def __init__(
        self,
        figure_size: Tuple[int, int] = (10, 6),
        dpi: int = 150,
        style: str = 'seaborn-v0_8-whitegrid',
        colors: List[str] = None
    ):
        self.figure_size = figure_size
        self.dpi = dpi
        self.style = style
        self.colors = colors or ['#b0b0b0', '#d62728', '#1f77b4', '#ff7f0e']

        try:
            plt.style.use(style)
        except OSError:
            print(f"Warning: Style '{style}' not available, using default")

    def plot_need_by_period(
        self,
        result: SimulationResult,
        save_path: str = None,
        show: bool = False
    ) -> plt.Figure:
        """
        Scatter of baseline vs follow-up need with the selected cohort highlighted.

        Parameters
        ----------
        result : SimulationResult
            Output of a pipeline run.
        save_path : str, optional
            Path to save the figure.
        show : bool, default=False
            Whether to display the plot.

        Returns
        -------
        plt.Figure
            Matplotlib figure object.
        """
        baseline_col = need_column(result.trial.baseline_period)
        followup_col = need_column(result.trial.followup_period)

        population = result.population.data
        cohort = result.cohort.data
        comparison = result.period_comparison

        fig, ax = plt.subplots(figsize=self.figure_size)

        ax.scatter(
            population[baseline_col], population[followup_col],
            alpha=0.3, s=12, color=self.colors[0], label='Population'
        )
        ax.scatter(
            cohort[baseline_col], cohort[followup_col],
            alpha=0.7, s=18, color=self.colors[1], label='Selected cohort'
        )

        lo = min(population[baseline_col].min(), population[followup_col].min())
        hi = max(population[baseline_col].max(), population[followup_col].max())
        ax.plot([lo, hi], [lo, hi], 'k--', linewidth=1, alpha=0.6, label='No change')

        ax.axvline(comparison['baseline_mean'], color=self.colors[1], linestyle=':', linewidth=2)
        ax.axhline(comparison['followup_mean'], color=self.colors[1], linestyle='-.', linewidth=2)

        ax.set_xlabel(f'Need, period {result.trial.baseline_period}', fontsize=11)
        ax.set_ylabel(f'Need, period {result.trial.followup_period}', fontsize=11)
        ax.set_title('Selected on high need, re-measured without intervention',
                     fontsize=13, fontweight='bold')
        ax.legend(loc='upper left')

        self._finish(fig, save_path, show, 'Need-by-period plot')
        return fig

    def plot_cohort_means(
        self,
        result: SimulationResult,
        save_path: str = None,
        show: bool = False
    ) -> plt.Figure:
        """Bar chart of cohort vs population means of propensity, luck and need."""
        profile = pd.DataFrame(result.selection_profile).rename_axis('field').reset_index()
        long = profile.melt(id_vars='field', var_name='group', value_name='mean')

        fig, ax = plt.subplots(figsize=self.figure_size)
        sns.barplot(
            data=long, x='field', y='mean', hue='group',
            palette={'population': self.colors[0], 'cohort': self.colors[1]},
            ax=ax
        )
        ax.axhline(y=0, color='black', linewidth=1)
        ax.set_xlabel('')
        ax.set_ylabel('Mean', fontsize=11)
        ax.set_title('High-need selection over-represents high propensity and high luck',
                     fontsize=13, fontweight='bold')

        self._finish(fig, save_path, show, 'Cohort means plot')
        return fig

    def plot_arm_changes(
        self,
        result: SimulationResult,
        save_path: str = None,
        show: bool = False
    ) -> plt.Figure:
        """Distribution of per-individual change by trial arm."""
        trial = result.trial

        fig, ax = plt.subplots(figsize=self.figure_size)
        palette = {'control': self.colors[2], 'treatment': self.colors[3]}
        order = ['control', 'treatment']

        sns.boxplot(
            data=trial.assignments, x='arm', y='change', hue='arm', order=order,
            palette=palette, showfliers=False, legend=False, ax=ax
        )
        sns.stripplot(
            data=trial.assignments, x='arm', y='change', order=order,
            color='black', alpha=0.4, size=3, ax=ax
        )
        ax.axhline(y=0, color='red', linestyle='--', linewidth=1.5, alpha=0.7)

        if trial.test_ran:
            subtitle = f"t = {trial.test.statistic:.2f}, p = {trial.test.p_value:.4f}"
        else:
            subtitle = str(trial.test)
        ax.set_xlabel('')
        ax.set_ylabel(f'Change in need ({trial.baseline_period} -> {trial.followup_period})',
                      fontsize=11)
        ax.set_title(f'Randomized comparison\n{subtitle}', fontsize=13, fontweight='bold')

        self._finish(fig, save_path, show, 'Arm change plot')
        return fig

    def _finish(self, fig: plt.Figure, save_path: str, show: bool, name: str) -> None:
        fig.tight_layout()

        if save_path:
            Path(save_path).parent.mkdir(parents=True, exist_ok=True)
            fig.savefig(save_path, dpi=self.dpi, bbox_inches='tight')
            print(f"{name} saved to: {save_path}")

        if show:
            plt.show()
