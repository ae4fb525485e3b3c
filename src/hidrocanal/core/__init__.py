"""Módulos de cálculo hidráulico."""

from hidrocanal.core.geometry import (
    SectionProperties,
    area,
    wetted_perimeter,
    top_width,
    hydraulic_radius,
    hydraulic_depth,
    max_depth,
    centroid_depth,
    section_properties,
)

from hidrocanal.core.flow import (
    gravity,
    manning_k,
    specific_weight,
    velocity,
    froude_number,
    specific_energy,
    friction_slope,
    shear_stress,
    specific_force,
    flow_regime,
    flow_depth_point,
)

from hidrocanal.core.solvers import (
    RootResult,
    bisect,
    secant,
)

from hidrocanal.core.critical import (
    solve_critical_depth,
    critical_depth,
    critical_velocity,
    critical_energy,
    is_flow_critical,
)

from hidrocanal.core.normal import (
    solve_normal_depth,
    normal_depth,
    normal_velocity,
    normal_froude_number,
    is_flow_uniform,
    classify_slope,
)

from hidrocanal.core.step import (
    StepResult,
    energy_residual,
    initial_guess,
    solve_step,
)

from hidrocanal.core.jump import (
    momentum_function,
    sequent_depth,
    energy_loss,
    jump_length,
    classify_jump,
    is_jump_possible,
    hydraulic_jump,
    detect_hydraulic_jump,
    detect_hydraulic_jumps,
    refine_jump_location,
    jump_points,
    incorporate_jumps,
)

from hidrocanal.core.profile import (
    MarchState,
    InitialConditions,
    ProfileMarch,
    setup_initial_conditions,
    determine_profile_type,
    optimal_step_count,
    water_surface_profile,
    high_resolution_profile,
    bidirectional_profile,
)

from hidrocanal.core.analysis import (
    FlowTransition,
    ProfileStatistics,
    flow_transitions,
    profile_statistics,
    interpolate_profile,
    uniform_profile,
    critical_depth_location,
    normal_depth_location,
    classify_by_transitions,
)

__all__ = [
    # Geometría
    "SectionProperties",
    "area",
    "wetted_perimeter",
    "top_width",
    "hydraulic_radius",
    "hydraulic_depth",
    "max_depth",
    "centroid_depth",
    "section_properties",
    # Parámetros de flujo
    "gravity",
    "manning_k",
    "specific_weight",
    "velocity",
    "froude_number",
    "specific_energy",
    "friction_slope",
    "shear_stress",
    "specific_force",
    "flow_regime",
    "flow_depth_point",
    # Métodos numéricos
    "RootResult",
    "bisect",
    "secant",
    # Tirante crítico
    "solve_critical_depth",
    "critical_depth",
    "critical_velocity",
    "critical_energy",
    "is_flow_critical",
    # Tirante normal y pendiente
    "solve_normal_depth",
    "normal_depth",
    "normal_velocity",
    "normal_froude_number",
    "is_flow_uniform",
    "classify_slope",
    # Paso estándar
    "StepResult",
    "energy_residual",
    "initial_guess",
    "solve_step",
    # Resalto hidráulico
    "momentum_function",
    "sequent_depth",
    "energy_loss",
    "jump_length",
    "classify_jump",
    "is_jump_possible",
    "hydraulic_jump",
    "detect_hydraulic_jump",
    "detect_hydraulic_jumps",
    "refine_jump_location",
    "jump_points",
    "incorporate_jumps",
    # Perfil
    "MarchState",
    "InitialConditions",
    "ProfileMarch",
    "setup_initial_conditions",
    "determine_profile_type",
    "optimal_step_count",
    "water_surface_profile",
    "high_resolution_profile",
    "bidirectional_profile",
    # Análisis
    "FlowTransition",
    "ProfileStatistics",
    "flow_transitions",
    "profile_statistics",
    "interpolate_profile",
    "uniform_profile",
    "critical_depth_location",
    "normal_depth_location",
    "classify_by_transitions",
]
