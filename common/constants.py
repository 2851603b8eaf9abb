from common.models import ServiceType, FluidPhase

g = 9.81                # m/s^2
R_gas = 8.314           # J/mol/K
T_abs = 273.15          # K at 0 degC

Re_laminar = 2300.0
Re_turbulent = 4000.0
Re_fully_turbulent = 1.0e4

min_pitch_ratio = 1.25
max_pitch_ratio = 1.5

safety_factors = {
    "pressure": 1.5,        # hydrotest / design pressure
    "vibration": 0.8,       # fraction of critical velocity
    "thermal": 1.25,        # area over-design
    "corrosion": 3.0,       # mm allowance
    "min_F": 0.75,          # minimum LMTD correction factor
}

# m/s (tube, shell)
velocity_limits = {
    ServiceType.CLEAN_LIQUID:   (2.4, 1.5),
    ServiceType.FOULING_LIQUID: (1.5, 0.9),
    ServiceType.GAS_VAPOR:      (30.0, 25.0),
    ServiceType.TWO_PHASE:      (15.0, 10.0),
    ServiceType.EROSIVE:        (1.0, 0.6),
}


def velocity_limit(service: ServiceType, phase: FluidPhase) -> tuple[float, float]:
    """(tube, shell) velocity limits; a gas phase overrides a liquid service."""
    if phase == FluidPhase.GAS and service in (ServiceType.CLEAN_LIQUID, ServiceType.FOULING_LIQUID):
        service = ServiceType.GAS_VAPOR
    elif phase == FluidPhase.TWO_PHASE and service != ServiceType.EROSIVE:
        service = ServiceType.TWO_PHASE
    return velocity_limits[service]


DISCLAIMER = (
    "Screening-level results only. Final design must be verified by a "
    "licensed engineer against TEMA, API 660 and ASME VIII."
)
