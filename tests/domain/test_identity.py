"""Tests for the AppIdentity domain model."""

import pytest

from swedbankjson.domain import AppIdentity, ProfileType
from swedbankjson.errors import InvalidAppData


class TestProfileType:
    """Tests for ProfileType derivation."""

    @pytest.mark.parametrize(
        "user_agent,expected",
        [
            ("SwedbankMOBCorporateIOS/2.5.0_(iOS;_11.2)_Apple/iPhone9,3", ProfileType.CORPORATE),
            ("CorporateApp/1.0", ProfileType.CORPORATE),
            ("SwedbankMOBPrivateIOS/4.9.0_(iOS;_11.2)_Apple/iPhone9,3", ProfileType.INDIVIDUAL),
            ("SwedbankMOBYouthIOS/1.6.0", ProfileType.INDIVIDUAL),
            ("corporate-lowercase/1.0", ProfileType.INDIVIDUAL),
        ],
    )
    def test_from_user_agent(self, user_agent, expected):
        assert ProfileType.from_user_agent(user_agent) == expected

    def test_values_match_api_profile_keys(self):
        assert ProfileType.INDIVIDUAL.value == "privateProfile"
        assert ProfileType.CORPORATE.value == "corporateProfiles"


class TestAppIdentity:
    """Tests for building identities from app data."""

    def test_from_app_data(self, private_app_data):
        identity = AppIdentity.from_app_data(private_app_data)
        assert identity.app_id == private_app_data["appID"]
        assert identity.user_agent == private_app_data["useragent"]
        assert identity.profile_type is ProfileType.INDIVIDUAL

    def test_corporate_app_data(self, corporate_app_data):
        identity = AppIdentity.from_app_data(corporate_app_data)
        assert identity.profile_type is ProfileType.CORPORATE

    def test_accepts_user_agent_key(self):
        identity = AppIdentity.from_app_data(
            {"appID": "abc", "userAgent": "SwedbankMOBPrivateIOS/4.9.0"})
        assert identity.user_agent == "SwedbankMOBPrivateIOS/4.9.0"

    @pytest.mark.parametrize(
        "app_data",
        [
            {},
            {"appID": "abc"},
            {"useragent": "SwedbankMOBPrivateIOS/4.9.0"},
            {"appID": "", "useragent": "SwedbankMOBPrivateIOS/4.9.0"},
            {"appID": "abc", "useragent": ""},
            None,
            ["abc", "SwedbankMOBPrivateIOS/4.9.0"],
        ],
    )
    def test_invalid_app_data(self, app_data):
        with pytest.raises(InvalidAppData):
            AppIdentity.from_app_data(app_data)

    def test_is_immutable(self, private_app_data):
        identity = AppIdentity.from_app_data(private_app_data)
        with pytest.raises(AttributeError):
            identity.app_id = "other"
