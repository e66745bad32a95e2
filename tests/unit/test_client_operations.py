"""Tests for the request objects built by ResponsysClient operations."""

import pytest

from responsys import Member, MergeRules
from responsys.exceptions import TooManyMembersError
from responsys.messages import (
    CreateList,
    Field,
    FieldType,
    FolderObjectType,
    InteractObject,
    LaunchCampaign,
    ListFolderObjects,
    ListFolders,
    MatchOperator,
    MergeListMembers,
    PermissionStatus,
    TriggerCampaignMessage,
    UpdateOnMatch,
)
from responsys.validation import MAX_MEMBERS


def _sent(transport, operation):
    (request,) = transport.requests_for(operation)
    return request


class TestFolderOperations:
    """Tests for folder listing and creation."""

    def test_list_folders(self, client, transport):
        """Sends an empty ListFolders request."""
        client.list_folders()

        assert isinstance(_sent(transport, "listFolders"), ListFolders)

    def test_create_folder(self, client, transport):
        """Sends the folder name."""
        client.create_folder("Newsletters")

        assert _sent(transport, "createFolder").folder_name == "Newsletters"

    def test_list_folder_objects(self, client, transport):
        """Sends folder name and object type."""
        client.list_folder_objects("Newsletters", FolderObjectType.LIST)

        request = _sent(transport, "listFolderObjects")
        assert isinstance(request, ListFolderObjects)
        assert request.folder_name == "Newsletters"
        assert request.type == FolderObjectType.LIST

    def test_response_returned_untouched(self, client, transport):
        """Whatever the transport returns is handed back."""
        sentinel = object()
        transport.responses["listFolders"] = sentinel

        assert client.list_folders() is sentinel


class TestCreateList:
    """Tests for create_list."""

    def test_accepts_fields_and_mappings(self, client, transport):
        """Field objects and dicts are both turned into Field values."""
        client.create_list(
            "Folder",
            "Subscribers",
            "All subscribers",
            [
                {"name": "CITY", "type": FieldType.STR500, "custom": True},
                Field("SCORE", FieldType.NUMBER),
            ],
        )

        request = _sent(transport, "createList")
        assert isinstance(request, CreateList)
        assert request.list == InteractObject("Folder", "Subscribers")
        assert request.description == "All subscribers"
        assert request.fields == (
            Field("CITY", FieldType.STR500, custom=True, key=False),
            Field("SCORE", FieldType.NUMBER),
        )


class TestMergeMembers:
    """Tests for merge_members."""

    def test_builds_record_data_and_rule(self, client, transport):
        """Members become one header plus ordered value rows."""
        members = [
            Member(email_address_="a@example.com", city="Paris"),
            Member(email_address_="b@example.com", city=None),
        ]
        rules = MergeRules(match_column_1="EMAIL_ADDRESS_", match_operator=MatchOperator.AND)

        client.merge_members("Folder", "List", members, rules)

        request = _sent(transport, "mergeListMembers")
        assert isinstance(request, MergeListMembers)
        assert request.list == InteractObject("Folder", "List")
        assert request.record_data.field_names == ("EMAIL_ADDRESS_", "CITY")
        assert request.record_data.records == (("a@example.com", "Paris"), ("b@example.com", None))
        rule = request.merge_rule
        assert rule.insert_on_no_match is True
        assert rule.update_on_match == UpdateOnMatch.REPLACE_ALL
        assert rule.match_column_name_1 == "EMAIL_ADDRESS_"
        assert rule.match_column_name_2 is None
        assert rule.match_operator == MatchOperator.AND
        assert rule.default_permission_status == PermissionStatus.OPTIN

    def test_mapping_rules_and_permission_status(self, client, transport):
        """Rules may be a mapping; permission status is passed through."""
        client.merge_members(
            "Folder",
            "List",
            [Member(email_address_="a@example.com")],
            {"match_column_1": "EMAIL_ADDRESS_", "update_on_match": UpdateOnMatch.NO_UPDATE},
            PermissionStatus.OPTOUT,
        )

        rule = _sent(transport, "mergeListMembers").merge_rule
        assert rule.update_on_match == UpdateOnMatch.NO_UPDATE
        assert rule.default_permission_status == PermissionStatus.OPTOUT

    def test_short_rule_keys(self, client, transport):
        """match_colN and operator keys are sent as the full rule fields."""
        client.save_members(
            "Folder",
            "List",
            [Member(email_address_="a@example.com")],
            {"match_col1": "EMAIL_ADDRESS_", "match_col2": "CUSTOMER_ID_", "operator": "and"},
        )

        rule = _sent(transport, "mergeListMembers").merge_rule
        assert rule.match_column_name_1 == "EMAIL_ADDRESS_"
        assert rule.match_column_name_2 == "CUSTOMER_ID_"
        assert rule.match_operator == MatchOperator.AND

    def test_too_many_members_fails_before_network(self, client, transport):
        """Oversized batches never reach the transport."""
        members = [Member(email_address_=f"m{i}@example.com") for i in range(MAX_MEMBERS + 1)]

        with pytest.raises(TooManyMembersError) as exc_info:
            client.merge_members("Folder", "List", members, None)

        assert exc_info.value.count == MAX_MEMBERS + 1
        assert transport.calls == []

    def test_exactly_max_members_is_sent(self, client, transport):
        """The limit itself is allowed."""
        members = [Member(email_address_=f"m{i}@example.com") for i in range(MAX_MEMBERS)]

        client.merge_members("Folder", "List", members)

        assert len(_sent(transport, "mergeListMembers").record_data.records) == MAX_MEMBERS

    def test_save_members_alias(self, client, transport):
        """save_members is the same operation."""
        client.save_members("Folder", "List", [Member(email_address_="a@example.com")])

        assert "mergeListMembers" in transport.operations


class TestCampaigns:
    """Tests for campaign launch and trigger."""

    def test_launch_campaign(self, client, transport):
        """Sends the campaign folder and name."""
        client.launch_campaign("Folder", "Spring Sale")

        request = _sent(transport, "launchCampaign")
        assert isinstance(request, LaunchCampaign)
        assert request.campaign == InteractObject("Folder", "Spring Sale")

    def test_trigger_with_optional_data(self, client, transport):
        """Optional data pairs are sent in order."""
        client.trigger_campaign_message("Folder", "Welcome", "a@b.com", {"FIRST_NAME": "Ann", "PLAN": "pro"})

        request = _sent(transport, "triggerCampaignMessage")
        assert isinstance(request, TriggerCampaignMessage)
        assert request.recipient_data.recipient.email_address == "a@b.com"
        pairs = [(d.name, d.value) for d in request.recipient_data.optional_data]
        assert pairs == [("FIRST_NAME", "Ann"), ("PLAN", "pro")]

    @pytest.mark.parametrize("empty", [None, {}])
    def test_trigger_without_data_gets_placeholder(self, client, transport, empty):
        """An empty optional-data set carries exactly one placeholder pair."""
        client.trigger_campaign_message("Folder", "Welcome", "a@b.com", empty)

        data = _sent(transport, "triggerCampaignMessage").recipient_data.optional_data
        assert len(data) == 1
        assert (data[0].name, data[0].value) == ("foo", "bar")

    def test_trigger_does_not_mutate_caller_dict(self, client, transport):
        """The caller's mapping is left as it was."""
        options = {}

        client.trigger_campaign_message("Folder", "Welcome", "a@b.com", options)

        assert options == {}
