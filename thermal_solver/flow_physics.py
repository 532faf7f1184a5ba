"""
Flow Physics - Hot-Water Draw to Thermal Power

Converts a draw flow rate and a temperature rise into the thermal power a
heat source must supply:

    P [kW] = flow [L/min] × ρ [kg/L] × c_p [kJ/(kg·K)] × ΔT [K] / 60

With c_p = 4.182 kJ/(kg·K) and ρ = 1 kg/L the coefficient is ≈ 0.0697 kW
per L/min per K. All scheduled draws are sized at the standard ΔT between
the cold mains and the delivered hot-water temperature (45 − 10 = 35 K).
"""

# Water properties
WATER_SPECIFIC_HEAT_KJ_PER_KG_K = 4.182
WATER_DENSITY_KG_PER_L = 1.0

#: Thermal power per unit flow per kelvin (kW per L/min per K).
KW_PER_LPM_PER_K = WATER_SPECIFIC_HEAT_KJ_PER_KG_K * WATER_DENSITY_KG_PER_L / 60.0

#: Reference hot-water delivery temperature (°C).
DHW_HOT_TEMP_C = 45.0

#: Reference cold-mains temperature (°C).
DHW_COLD_TEMP_C = 10.0

#: Standard temperature rise used for all draw-event sizing (K).
DHW_DELTA_T_C = DHW_HOT_TEMP_C - DHW_COLD_TEMP_C


def dhw_kw_from_flow(flow_lpm: float, delta_t_c: float = DHW_DELTA_T_C) -> float:
    """
    Thermal power needed to heat a water flow by ``delta_t_c``.

    Args:
        flow_lpm: Flow rate (L/min)
        delta_t_c: Temperature rise (K)

    Returns:
        Power (kW). Exactly 0.0 when the delta or the flow is not positive.
    """
    if delta_t_c <= 0 or flow_lpm <= 0:
        return 0.0
    return flow_lpm * delta_t_c * KW_PER_LPM_PER_K


def flow_lpm_from_kw(power_kw: float, delta_t_c: float = DHW_DELTA_T_C) -> float:
    """Inverse of :func:`dhw_kw_from_flow` (L/min deliverable from ``power_kw``)."""
    if delta_t_c <= 0 or power_kw <= 0:
        return 0.0
    return power_kw / (delta_t_c * KW_PER_LPM_PER_K)


def stored_energy_kwh(volume_l: float, delta_t_c: float = DHW_DELTA_T_C) -> float:
    """Usable energy held by ``volume_l`` of water at ``delta_t_c`` above mains (kWh)."""
    if volume_l <= 0 or delta_t_c <= 0:
        return 0.0
    # kW per (L/min) is kWh per (L/60), hence the /60
    return volume_l * delta_t_c * KW_PER_LPM_PER_K / 60.0
