"""
Tests for typed product specifications.
"""

import pytest
from django.core.exceptions import ValidationError

from stockledger.models import Product, ProductCategory
from stockledger.specs import (
    CameraSpec,
    GenericSpec,
    HddSpec,
    NvrSpec,
    defaults_for,
    merge_defaults,
    parse_spec,
    spec_to_dict,
    validate_spec,
)


class TestParseSpec:

    def test_variant_per_category(self):
        assert isinstance(parse_spec('nvr', {}), NvrSpec)
        assert isinstance(parse_spec('hdd', {}), HddSpec)
        assert isinstance(parse_spec('cctv_camera', {}), CameraSpec)
        assert isinstance(parse_spec('other', {'colour': 'black'}), GenericSpec)

    def test_unknown_category(self):
        with pytest.raises(ValueError):
            parse_spec('drone', {})

    def test_unknown_field(self):
        with pytest.raises(ValueError, match='poe_budget'):
            parse_spec('nvr', {'poe_budget': '60W'})

    def test_wrong_types(self):
        with pytest.raises(TypeError):
            parse_spec('nvr', {'supported_camera_resolution': '4 MP'})
        with pytest.raises(TypeError):
            parse_spec('nvr', {'raid_support': 'yes'})

    def test_numbers_become_text(self):
        assert parse_spec('nvr', {'channel_capacity': 16}).channel_capacity == '16'

    def test_camera_defaults(self):
        spec = parse_spec('cctv_camera', {})

        assert spec.show_in_store is True
        assert spec.allow_in_quotation_builder is True
        assert spec.compatible_with == []

    def test_generic_round_trip(self):
        assert spec_to_dict(parse_spec('other', {'length': '90m'})) == {'length': '90m'}


class TestValidateSpec:

    def test_nvr_required_fields(self):
        errors = validate_spec(parse_spec('nvr', {'channel_capacity': '8'}))

        assert errors == [
            'Supported Camera Resolution is required',
            'SATA Ports is required',
            'Body Material is required',
        ]

    def test_dvr_requires_power_supply(self):
        errors = validate_spec(parse_spec('dvr', {
            'channel_capacity': '8',
            'supported_camera_resolution': ['2 MP'],
            'sata_ports': '1',
            'body_material': 'metal',
        }))

        assert errors == ['Power Supply Type is required']

    def test_hdd_labels(self):
        errors = validate_spec(parse_spec('hdd', {'storage_capacity': '2TB'}))

        assert errors == ['HDD Type is required', 'Compatible With (DVR/NVR) is required']

    def test_camera_labels(self):
        errors = validate_spec(parse_spec('cctv_camera', {}))

        assert 'CCTV System Type is required' in errors
        assert 'Indoor/Outdoor selection is required' in errors
        assert 'Compatible With (DVR/NVR) is required' in errors
        assert len(errors) == 9

    def test_generic_has_no_requirements(self):
        assert validate_spec(parse_spec('other', {})) == []


class TestDefaults:

    def test_nvr_16_channels(self):
        defaults = defaults_for('nvr', {'channel_capacity': '16'})

        assert defaults['poe_ports'] == '16'
        assert defaults['sata_ports'] == '2'
        assert defaults['incoming_bandwidth'] == '160Mbps'
        assert defaults['mobile_app'] == 'DMSS / Hik-Connect'

    def test_nvr_32_channels_have_no_poe(self):
        defaults = defaults_for('nvr', {'channel_capacity': 32})

        assert defaults['poe_ports'] == 'none'
        assert defaults['sata_ports'] == '4'
        assert defaults['incoming_bandwidth'] == '320Mbps'

    def test_nvr_defaults_to_8_channels(self):
        defaults = defaults_for('nvr')

        assert defaults['poe_ports'] == '8'
        assert defaults['sata_ports'] == '1'
        assert defaults['incoming_bandwidth'] == '80Mbps'

    def test_nvr_unlisted_channel_count_gets_base(self):
        defaults = defaults_for('nvr', {'channel_capacity': '64'})

        assert 'poe_ports' not in defaults
        assert defaults['body_material'] == 'metal'

    def test_defaults_are_fresh_copies(self):
        defaults_for('nvr')['video_output_ports'].append('SDI')

        assert defaults_for('nvr')['video_output_ports'] == ['HDMI', 'VGA']

    def test_no_quick_fill_for_hdd(self):
        assert defaults_for('hdd') == {}

    def test_merge_keeps_filled_values(self):
        current = {'channel_capacity': '16', 'body_material': 'plastic', 'video_output_ports': []}

        merged = merge_defaults(current, defaults_for('nvr', current))

        assert merged['body_material'] == 'plastic'
        assert merged['video_output_ports'] == ['HDMI', 'VGA']
        assert merged['sata_ports'] == '2'
        assert validate_spec(parse_spec('nvr', merged)) == []
        assert current['video_output_ports'] == []


@pytest.mark.django_db
class TestProductClean:

    def test_invalid_specs_rejected(self):
        product = Product(name='NVR', category=ProductCategory.NVR, specifications={'channel_capacity': '4'})

        with pytest.raises(ValidationError) as exc:
            product.full_clean()

        assert 'specifications' in exc.value.message_dict

    def test_quick_filled_specs_accepted(self):
        specs = merge_defaults({'channel_capacity': '4'}, defaults_for('nvr', {'channel_capacity': '4'}))
        product = Product(name='NVR', category=ProductCategory.NVR, specifications=specs)

        product.full_clean()
