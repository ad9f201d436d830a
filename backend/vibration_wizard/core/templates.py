"""
Built-in PSD templates and industry mission profiles.

The PSD library is built by ``load_default_library()`` and handed to callers;
mission templates reference PSD templates by id only.
"""
from typing import Dict, List, Optional, Sequence, Tuple

from .psd import PsdTemplateLibrary
from .types import (
    CycleThermal,
    Industry,
    MissionProfile,
    MissionState,
    MissionTemplate,
    PsdPoint,
    PsdTemplate,
    SteadyThermal,
    TemplatePsd,
)


def _psd(template_id: str, name: str, points: Sequence[Tuple[float, float]]) -> PsdTemplate:
    return PsdTemplate(template_id, name, tuple(PsdPoint(f, g2) for f, g2 in points))


PSD_TEMPLATES: Tuple[PsdTemplate, ...] = (
    _psd("auto-city", "Auto City Ride", [
        (10, 0.0002), (30, 0.001), (80, 0.004), (200, 0.006),
        (500, 0.0025), (1000, 0.001), (2000, 0.0004),
    ]),
    _psd("auto-rough", "Auto Rough Road", [
        (10, 0.0006), (25, 0.002), (60, 0.008), (150, 0.012),
        (400, 0.006), (800, 0.003), (2000, 0.001),
    ]),
    _psd("auto-highway", "Auto Highway", [
        (10, 0.00015), (40, 0.0008), (100, 0.003), (250, 0.004),
        (600, 0.0018), (1200, 0.0007), (2000, 0.0003),
    ]),
    _psd("datacenter-fan", "Rack Server Fan", [
        (20, 0.0001), (60, 0.0005), (120, 0.0025), (240, 0.0035),
        (500, 0.0012), (1000, 0.0005), (2000, 0.0002),
    ]),
    _psd("datacenter-transport", "Rack Transport", [
        (5, 0.0004), (20, 0.0015), (60, 0.003), (120, 0.004),
        (300, 0.002), (800, 0.0009), (1500, 0.0004),
    ]),
    _psd("industrial-motor", "Motor Controller Near Motor", [
        (10, 0.0003), (40, 0.001), (90, 0.0045), (180, 0.006),
        (400, 0.003), (900, 0.0014), (1800, 0.0006),
    ]),
    _psd("consumer-washer", "Washer Controller", [
        (5, 0.0005), (15, 0.0022), (40, 0.004), (80, 0.003),
        (200, 0.0015), (600, 0.0006), (1200, 0.0003),
    ]),
    _psd("health-wearable", "Wearable Motion", [
        (1, 0.00015), (3, 0.0005), (8, 0.0012), (15, 0.0014),
        (30, 0.0009), (80, 0.0003), (200, 0.00012),
    ]),
    _psd("random-transport", "Random Transport (truck/air)", [
        (5, 0.001), (10, 0.005), (40, 0.005), (80, 0.002),
        (200, 0.001), (500, 0.0004), (1000, 0.0002),
    ]),
    _psd("shock-event", "Shock / Rough Handling Events", [
        (10, 0.01), (40, 0.04), (150, 0.04), (400, 0.01),
        (1000, 0.003), (2000, 0.001),
    ]),
)


def load_default_library() -> PsdTemplateLibrary:
    """Build the built-in PSD template library."""
    return PsdTemplateLibrary(PSD_TEMPLATES)


def _steady(state_id: str, name: str, hours: float, template_id: str, scale: float, t_c: float) -> MissionState:
    return MissionState(state_id, name, hours, TemplatePsd(template_id, scale), SteadyThermal(t_c))


def _cycle(
    state_id: str, name: str, hours: float, template_id: str, scale: float,
    tmin: float, tmax: float, ramp: float, soak: float, cph: float
) -> MissionState:
    return MissionState(
        state_id, name, hours, TemplatePsd(template_id, scale),
        CycleThermal(tmin, tmax, ramp, soak, cph),
    )


def _mission(
    template_id: str, industry: Industry, name: str, description: str,
    life_h: float, states: Sequence[MissionState], profile_name: Optional[str] = None
) -> MissionTemplate:
    profile = MissionProfile(
        name=profile_name or name,
        states=tuple(states),
        intended_life_h=life_h,
        industry=industry,
    )
    return MissionTemplate(template_id, industry, name, description, profile)


MISSION_TEMPLATES: Tuple[MissionTemplate, ...] = (
    _mission("auto-body-ecu", Industry.AUTOMOTIVE, "Body / Interior ECU",
             "Mixed urban, highway, and rough road usage with hot soak cycles.", 50000, [
                 _steady("auto-city", "City Drive", 22000, "auto-city", 1, 35),
                 _steady("auto-highway", "Highway Cruise", 20000, "auto-highway", 1, 45),
                 _steady("auto-rough", "Rough Road Events", 6000, "auto-rough", 1, 30),
                 _cycle("auto-hotsoak", "Hot Soak Cycles", 2000, "auto-city", 0.6, 25, 85, 2, 20, 1),
             ]),
    _mission("auto-engine-bay-controller", Industry.AUTOMOTIVE, "Engine Bay Controller",
             "High-heat engine bay exposure with mixed road vibration and hot soak cycles.", 50000, [
                 _steady("auto-eb-urban", "Urban Start/Stop", 18000, "auto-city", 1.1, 70),
                 _steady("auto-eb-highway", "Highway Cruise", 18000, "auto-highway", 1, 75),
                 _steady("auto-eb-rough", "Rough Road Events", 10000, "auto-rough", 1.2, 65),
                 _cycle("auto-eb-hotsoak", "Hot Soak Cycles", 4000, "auto-city", 0.8, 35, 105, 2.5, 15, 0.8),
             ]),
    _mission("auto-chassis-underbody", Industry.AUTOMOTIVE, "Chassis / Underbody Module",
             "High road-input vibration with modest temperature swings.", 50000, [
                 _steady("auto-ch-urban", "Urban Road", 15000, "auto-city", 1, 30),
                 _steady("auto-ch-highway", "Highway Cruise", 15000, "auto-highway", 0.9, 32),
                 _steady("auto-ch-rough", "Rough / Cobblestone", 15000, "auto-rough", 1.3, 25),
                 _cycle("auto-ch-thermal", "Seasonal Thermal Cycle", 5000, "auto-city", 0.7, 0, 50, 1.5, 20, 0.5),
             ]),
    _mission("auto-battery-pack-module", Industry.AUTOMOTIVE, "Battery Pack Module (EV)",
             "Moderate road vibration with controlled thermal exposure and cycling.", 50000, [
                 _steady("auto-bp-urban", "Urban Driving", 20000, "auto-city", 0.8, 30),
                 _steady("auto-bp-highway", "Highway Cruise", 20000, "auto-highway", 0.7, 34),
                 _steady("auto-bp-rough", "Road Shock Events", 6000, "auto-rough", 0.9, 28),
                 _cycle("auto-bp-cycle", "Charge / Discharge Cycling", 4000, "auto-city", 0.5, 20, 50, 1.2, 25, 0.5),
             ]),
    _mission("auto-inverter-power", Industry.AUTOMOTIVE, "Inverter / Power Electronics",
             "High-power thermal exposure with mixed road vibration.", 50000, [
                 _steady("auto-inv-urban", "Urban Load", 16000, "auto-city", 1, 60),
                 _steady("auto-inv-highway", "High Power Drive", 16000, "auto-highway", 1.1, 80),
                 _steady("auto-inv-rough", "Rough Road Events", 10000, "auto-rough", 1.1, 55),
                 _cycle("auto-inv-thermal", "Thermal Cycling", 8000, "auto-city", 0.7, 25, 110, 2, 12, 0.7),
             ]),
    _mission("datacenter-rack", Industry.DATA_CENTER_AI, "Rack Server / Fan Vibration",
             "Fan-driven vibration with mostly steady warm thermal conditions.", 40000, [
                 _steady("dc-idle", "Idle / Low Fan", 15000, "datacenter-fan", 0.6, 32),
                 _steady("dc-normal", "Normal Operation", 17000, "datacenter-fan", 1, 40),
                 _steady("dc-peak", "High Fan / Peak Load", 6000, "datacenter-fan", 1.4, 50),
                 _steady("dc-transport", "Rack Transport", 2000, "datacenter-transport", 1, 25),
             ], profile_name="Rack Server"),
    _mission("industrial-motor-controller", Industry.INDUSTRIAL, "Motor Controller Near Motor",
             "Motor harmonics and operational start/stop thermal swings.", 35000, [
                 _steady("ind-steady", "Steady Run", 20000, "industrial-motor", 1, 45),
                 _cycle("ind-start-stop", "Start / Stop Cycles", 9000, "industrial-motor", 1.2, 20, 70, 1.5, 15, 0.6),
                 _steady("ind-maint", "Maintenance / Low Load", 6000, "industrial-motor", 0.5, 30),
             ], profile_name="Motor Controller"),
    _mission("industrial-plc-cabinet", Industry.INDUSTRIAL, "PLC / Control Cabinet",
             "Low vibration in cabinet-mounted control gear with steady warm temperatures.", 35000, [
                 _steady("plc-normal", "Normal Operation", 20000, "industrial-motor", 0.4, 38),
                 _steady("plc-peak", "High Load", 8000, "industrial-motor", 0.7, 45),
                 _cycle("plc-thermal", "Cabinet Thermal Cycle", 5000, "industrial-motor", 0.3, 25, 55, 1.2, 20, 0.3),
                 _steady("plc-transport", "Transport / Handling", 2000, "datacenter-transport", 0.8, 25),
             ]),
    _mission("industrial-pump-controller", Industry.INDUSTRIAL, "Pump Controller",
             "Continuous pump vibration with periodic thermal cycling and maintenance periods.", 35000, [
                 _steady("pump-run", "Continuous Run", 18000, "industrial-motor", 1, 40),
                 _steady("pump-peak", "Peak Load", 8000, "industrial-motor", 1.2, 50),
                 _cycle("pump-thermal", "Thermal Cycling", 4000, "industrial-motor", 0.6, 20, 60, 1, 15, 0.5),
                 _steady("pump-maint", "Maintenance / Low Load", 5000, "industrial-motor", 0.4, 30),
             ]),
    _mission("industrial-compressor-drive", Industry.INDUSTRIAL, "Compressor Drive",
             "High vibration drive with frequent start/stop and elevated temperatures.", 35000, [
                 _steady("comp-steady", "Steady Compression", 15000, "industrial-motor", 1.1, 55),
                 _cycle("comp-start-stop", "Start / Stop Cycling", 8000, "industrial-motor", 1.3, 20, 80, 2, 10, 0.7),
                 _steady("comp-low", "Low Load", 10000, "industrial-motor", 0.6, 40),
                 _steady("comp-transport", "Transport / Handling", 2000, "datacenter-transport", 1, 25),
             ]),
    _mission("industrial-robot-controller", Industry.INDUSTRIAL, "Robotics Controller",
             "Moderate vibration from robot motion with mixed duty cycles.", 35000, [
                 _steady("robot-normal", "Normal Duty", 14000, "industrial-motor", 0.8, 38),
                 _steady("robot-high", "High Duty", 12000, "industrial-motor", 1.1, 45),
                 _steady("robot-idle", "Idle / Standby", 5000, "industrial-motor", 0.4, 30),
                 _cycle("robot-thermal", "Thermal Cycling", 4000, "industrial-motor", 0.6, 20, 60, 2, 10, 1),
             ]),
    _mission("consumer-washer-controller", Industry.CONSUMER, "Washing Machine Controller",
             "Spin cycle vibration with periodic thermal cycling.", 25000, [
                 _steady("cons-idle", "Idle / Standby", 16000, "consumer-washer", 0.35, 28),
                 _steady("cons-wash", "Wash / Agitation", 6000, "consumer-washer", 1, 35),
                 _steady("cons-spin", "High Spin", 2500, "consumer-washer", 1.4, 40),
                 _cycle("cons-thermal", "Thermal Cycles", 500, "consumer-washer", 0.8, 20, 60, 2, 10, 1.2),
             ], profile_name="Washer Controller"),
    _mission("consumer-laptop", Industry.CONSUMER, "Laptop (fan + mild thermal)",
             "Fan-driven vibration with light thermal cycling.", 20000, [
                 _steady("cons-laptop-idle", "Idle / Light Use", 12000, "datacenter-fan", 0.4, 32),
                 _steady("cons-laptop-active", "Active Use", 7000, "datacenter-fan", 1, 45),
                 _cycle("cons-laptop-thermal", "Thermal Cycling", 1000, "datacenter-fan", 0.6, 25, 65, 3, 5, 2),
             ]),
    _mission("consumer-desktop", Industry.CONSUMER, "Desktop (fan + steadier thermal)",
             "Steady fan vibration with modest thermal variation.", 20000, [
                 _steady("cons-desktop-idle", "Idle", 9000, "datacenter-fan", 0.5, 30),
                 _steady("cons-desktop-work", "Workload", 9000, "datacenter-fan", 1.1, 42),
                 _steady("cons-desktop-transport", "Shipping / Move", 2000, "datacenter-transport", 1, 25),
             ]),
    _mission("consumer-fridge-controller", Industry.CONSUMER, "Refrigerator controller",
             "Compressor vibration with thermal cycling from defrost events.", 20000, [
                 _steady("cons-fridge-on", "Compressor On", 9000, "consumer-washer", 0.8, 10),
                 _steady("cons-fridge-off", "Compressor Off", 9000, "consumer-washer", 0.3, 5),
                 _cycle("cons-fridge-defrost", "Defrost Cycle", 2000, "consumer-washer", 0.5, 2, 25, 1, 15, 0.3),
             ]),
    _mission("consumer-dishwasher-controller", Industry.CONSUMER, "Dishwasher controller",
             "Pump vibration with warm wash cycles and drying heat.", 20000, [
                 _steady("cons-dw-wash", "Wash / Circulation", 6000, "consumer-washer", 1.1, 50),
                 _steady("cons-dw-drain", "Drain / Pump", 3000, "consumer-washer", 1.3, 45),
                 _cycle("cons-dw-dry", "Dry / Heat", 2000, "consumer-washer", 0.6, 30, 70, 2, 10, 1),
                 _steady("cons-dw-idle", "Idle / Standby", 9000, "consumer-washer", 0.2, 25),
             ]),
    _mission("consumer-hvac-unit", Industry.CONSUMER, "HVAC consumer unit",
             "Fan/compressor vibration with seasonal thermal cycling.", 20000, [
                 _steady("cons-hvac-run", "Cooling / Heating Run", 10000, "industrial-motor", 1, 45),
                 _steady("cons-hvac-mod", "Moderate Load", 6000, "industrial-motor", 0.7, 35),
                 _cycle("cons-hvac-thermal", "Seasonal Thermal Cycle", 4000, "industrial-motor", 0.4, 10, 60, 1, 30, 0.2),
             ]),
    _mission("health-wearable", Industry.HEALTHCARE, "Wearable Device (Human Motion)",
             "Low-frequency motion with mild thermal exposure.", 20000, [
                 _steady("health-rest", "Rest / Sleep", 8000, "health-wearable", 0.4, 30),
                 _steady("health-walk", "Daily Activity", 9000, "health-wearable", 1, 33),
                 _steady("health-exercise", "Workout Sessions", 2500, "health-wearable", 1.6, 36),
                 _cycle("health-thermal", "Ambient Thermal Cycle", 500, "health-wearable", 0.7, 18, 42, 1, 15, 0.8),
             ], profile_name="Wearable Motion"),
)

_MISSIONS_BY_ID: Dict[str, MissionTemplate] = {t.id: t for t in MISSION_TEMPLATES}


def list_mission_templates(industry: Optional[Industry] = None) -> List[MissionTemplate]:
    """Mission templates, optionally filtered by industry."""
    if industry is None:
        return list(MISSION_TEMPLATES)
    return [t for t in MISSION_TEMPLATES if t.industry == industry]


def get_mission_template(template_id: str) -> Optional[MissionTemplate]:
    return _MISSIONS_BY_ID.get(template_id)


def get_default_mission_template(industry: Industry) -> MissionTemplate:
    """First template of an industry, or the first template overall."""
    matches = list_mission_templates(industry)
    return matches[0] if matches else MISSION_TEMPLATES[0]
