"""
Product specifications — one typed variant per category.

Product.specifications is stored as JSON; these dataclasses are its
schema. Each variant marks its required fields with a label, which is
also what validate_spec() reports.

Usage:
    from stockledger.specs import defaults_for, merge_defaults, parse_spec, validate_spec

    spec = parse_spec('nvr', product.specifications)
    errors = validate_spec(spec)     # ['SATA Ports is required', ...]

    filled = merge_defaults(product.specifications, defaults_for('nvr', {'channel_capacity': '16'}))
"""

from dataclasses import asdict, dataclass, field, fields
from typing import Any, get_origin

from stockledger.models.enums import ProductCategory


def required(label: str, default: Any = '', **kwargs):
    """Field that validate_spec() reports as '<label> is required' when empty."""
    if isinstance(default, list):
        return field(default_factory=list, metadata={'label': label}, **kwargs)
    return field(default=default, metadata={'label': label}, **kwargs)


def _empty_list():
    return field(default_factory=list)


@dataclass
class CameraSpec:
    cctv_system_type: str = required('CCTV System Type')
    camera_type: str = required('Camera Type')
    indoor_outdoor: str = required('Indoor/Outdoor selection')
    resolution: str = required('Resolution')
    megapixel: str = required('Megapixel')
    lens_type: str = required('Lens Type')
    lens_size: str = ''
    frame_rate: str = ''
    ir_support: bool = False
    ir_range: str = ''
    night_vision: bool = False
    bw_night_vision: bool = False
    color_night_vision: bool = False
    audio_support: bool = False
    audio_type: str = ''
    motion_detection: bool = False
    human_detection: bool = False
    ai_features: list[str] = _empty_list()
    body_material: str = required('Body Material')
    color: str = ''
    weatherproof_rating: str = ''
    vertical_rotation: bool = False
    horizontal_rotation: bool = False
    power_type: str = required('Power Type')
    connector_type: str = ''
    onboard_storage: bool = False
    sd_card_support: str = ''
    compatible_with: list[str] = required('Compatible With (DVR/NVR)', default=[])
    supported_dvr_nvr_resolution: str = ''
    warranty_period: str = ''
    warranty_type: str = ''
    installation_manual_url: str = ''
    show_in_store: bool = True
    allow_in_quotation_builder: bool = True


@dataclass
class DvrSpec:
    channel_capacity: str = required('Channel Capacity')
    supported_camera_resolution: list[str] = required('Supported Camera Resolution', default=[])
    recording_resolution: str = ''
    video_input_type: list[str] = _empty_list()
    sata_ports: str = required('SATA Ports')
    max_hdd_capacity: str = ''
    supported_hdd_type: str = ''
    video_output_ports: list[str] = _empty_list()
    audio_input: bool = False
    audio_output: bool = False
    audio_channels: str = ''
    lan_port: str = ''
    remote_viewing: bool = False
    mobile_app: str = ''
    ai_features: list[str] = _empty_list()
    power_supply_type: str = required('Power Supply Type')
    power_input: str = ''
    body_material: str = required('Body Material')
    cooling_fan: bool = False
    warranty_period: str = ''
    allow_in_quotation: bool = False


@dataclass
class NvrSpec:
    channel_capacity: str = required('Channel Capacity')
    supported_camera_resolution: list[str] = required('Supported Camera Resolution', default=[])
    incoming_bandwidth: str = ''
    sata_ports: str = required('SATA Ports')
    max_hdd_capacity: str = ''
    raid_support: bool = False
    poe_ports: str = ''
    poe_standard: str = ''
    lan_ports: str = ''
    video_output_ports: list[str] = _empty_list()
    audio_input: bool = False
    audio_output: bool = False
    ai_features: list[str] = _empty_list()
    onvif_support: bool = False
    mobile_app: str = ''
    body_material: str = required('Body Material')
    cooling_fan: bool = False
    warranty_period: str = ''
    allow_in_quotation: bool = False


@dataclass
class HddSpec:
    storage_capacity: str = required('Storage Capacity')
    hdd_type: str = required('HDD Type')
    interface_type: str = ''
    rpm: str = ''
    cache_memory: str = ''
    workload_rating: str = ''
    max_cameras: str = ''
    power_consumption: str = ''
    compatible_with: list[str] = required('Compatible With (DVR/NVR)', default=[])
    warranty_period: str = ''
    allow_in_quotation: bool = False


@dataclass
class GenericSpec:
    """Categories without a schema keep free-form attributes."""

    attributes: dict = field(default_factory=dict)


SPEC_TYPES = {
    ProductCategory.CCTV_CAMERA: CameraSpec,
    ProductCategory.DVR: DvrSpec,
    ProductCategory.NVR: NvrSpec,
    ProductCategory.HDD: HddSpec,
    ProductCategory.OTHER: GenericSpec,
}


def spec_type(category: str) -> type:
    try:
        return SPEC_TYPES[category]
    except KeyError:
        raise ValueError(f"Unknown product category: {category!r}") from None


def _coerce(name: str, annotation, value):
    if get_origin(annotation) is list or annotation is list:
        if not isinstance(value, list):
            raise TypeError(f"{name} must be a list")
        return [str(v) for v in value]
    if annotation is bool:
        if not isinstance(value, bool):
            raise TypeError(f"{name} must be true or false")
        return value
    if annotation is str:
        if value is None:
            return ''
        if isinstance(value, bool) or not isinstance(value, (str, int)):
            raise TypeError(f"{name} must be text")
        return str(value)
    return value


def parse_spec(category: str, data: dict):
    """
    Build the category's spec variant from stored JSON.

    Raises:
        ValueError: Unknown category or unknown fields
        TypeError: A field has the wrong type
    """
    cls = spec_type(category)
    if cls is GenericSpec:
        return GenericSpec(attributes=dict(data or {}))

    data = data or {}
    known = {f.name: f for f in fields(cls)}
    unknown = sorted(set(data) - set(known))
    if unknown:
        raise ValueError(f"Unknown {category} specification field(s): {', '.join(unknown)}")
    return cls(**{
        name: _coerce(name, known[name].type, value)
        for name, value in data.items()
    })


def validate_spec(spec) -> list[str]:
    """Messages for every required field left empty."""
    errors = []
    for f in fields(spec):
        label = f.metadata.get('label')
        if label and not getattr(spec, f.name):
            errors.append(f"{label} is required")
    return errors


def spec_to_dict(spec) -> dict:
    if isinstance(spec, GenericSpec):
        return dict(spec.attributes)
    return asdict(spec)


NVR_BASE_DEFAULTS = {
    'supported_camera_resolution': ['2 MP', '4 MP', '5 MP', '8 MP'],
    'incoming_bandwidth': '80Mbps',
    'max_hdd_capacity': '8TB',
    'raid_support': False,
    'poe_standard': '802.3af',
    'lan_ports': '1x_gigabit',
    'video_output_ports': ['HDMI', 'VGA'],
    'audio_input': True,
    'audio_output': True,
    'ai_features': ['Motion Detection', 'Human Detection'],
    'onvif_support': True,
    'mobile_app': 'DMSS / Hik-Connect',
    'body_material': 'metal',
    'cooling_fan': True,
    'warranty_period': '1_year',
    'allow_in_quotation': True,
}

NVR_CHANNEL_DEFAULTS = {
    '4': {'poe_ports': '4', 'sata_ports': '1'},
    '8': {'poe_ports': '8', 'sata_ports': '1'},
    '16': {'poe_ports': '16', 'sata_ports': '2', 'incoming_bandwidth': '160Mbps'},
    '32': {'poe_ports': 'none', 'sata_ports': '4', 'incoming_bandwidth': '320Mbps'},
}


def defaults_for(category: str, context: dict | None = None) -> dict:
    """
    Quick-fill values for a category.

    For NVRs the context's channel_capacity (default '8') picks the PoE
    port count, SATA ports and bandwidth. Cameras get the visibility
    flags. Other categories have no quick-fill.
    """
    context = context or {}
    if category == ProductCategory.NVR:
        channels = str(context.get('channel_capacity') or '8')
        defaults = {**NVR_BASE_DEFAULTS, **NVR_CHANNEL_DEFAULTS.get(channels, {})}
        return {k: list(v) if isinstance(v, list) else v for k, v in defaults.items()}
    if category == ProductCategory.CCTV_CAMERA:
        return {'show_in_store': True, 'allow_in_quotation_builder': True}
    spec_type(category)
    return {}


def _is_blank(value) -> bool:
    return value is None or value == '' or value is False or value == []


def merge_defaults(current: dict, defaults: dict) -> dict:
    """Fill blank fields of current from defaults. Filled values win."""
    merged = dict(current or {})
    for key, value in defaults.items():
        if _is_blank(merged.get(key)):
            merged[key] = value
    return merged
