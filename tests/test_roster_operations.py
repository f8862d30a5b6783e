"""Tests for roster normalization, persistence, templates and import/export."""

import json

import pytest

from race_board.constants import AwardConstants, RosterConstants
from race_board.data_models.team import Member, Team
from race_board.operations.roster_operations import (
    EXPORT_FORMAT_VERSION, RosterOperations, create_sample_roster, export_teams_as_json,
    import_teams_from_json, normalize_team, parse_number
)
from race_board.services.leaderboard import LeaderboardService
from race_board.utils.roster_exceptions import (
    InvalidFieldError, LastTeamError, MemberSlotError, RosterImportError,
    TeamNotFoundError, TemplateNotFoundError
)


class TestParseNumber:
    def test_empty_input_is_absent(self):
        assert parse_number("") is None
        assert parse_number("   ") is None
        assert parse_number(None) is None

    def test_garbage_counts_as_zero(self):
        assert parse_number("abc") == 0
        assert parse_number("inf") == 0

    def test_clamped(self):
        assert parse_number("-5") == 0
        assert parse_number("12000", 0, RosterConstants.MAX_INPUT_VALUE) == 9_999

    def test_clamped_values_come_back_as_ints(self):
        low = parse_number("-250")
        high = parse_number(12000.5, 0, RosterConstants.MAX_INPUT_VALUE)
        assert low == 0 and isinstance(low, int)
        assert high == 9_999 and isinstance(high, int)

    def test_integral_values_become_int(self):
        assert parse_number("35") == 35
        assert isinstance(parse_number("35.0"), int)
        assert parse_number("35.5") == 35.5


class TestNormalizeTeam:
    def test_blank_team(self):
        team = normalize_team()
        assert team.id
        assert team.name == ""
        assert team.final_amount is None
        assert team.level == RosterConstants.DEFAULT_LEVEL
        assert len(team.members) == RosterConstants.MAX_MEMBER_COUNT
        assert all(member.is_empty for member in team.members)

    def test_bad_level_falls_back(self):
        assert normalize_team({"level": 9}).level == 1
        assert normalize_team({"level": "x"}).level == 1
        assert normalize_team({"level": "5"}).level == 5

    def test_non_numeric_values_become_absent(self):
        team = normalize_team({"final_amount": "lots", "play_time_minutes": float("nan")})
        assert team.final_amount is None
        assert team.play_time_minutes is None

    def test_members_padded_and_truncated(self):
        team = normalize_team({"members": [{"name": f"m{index}", "hp": 10} for index in range(6)]})
        assert [member.name for member in team.members] == ["m0", "m1", "m2", "m3"]

    def test_existing_team_keeps_id(self):
        team = Team(id="keep", name="Kept", members=(Member(id="x", name="Solo"),))
        normalized = normalize_team(team)
        assert normalized.id == "keep"
        assert len(normalized.members) == 4
        assert normalized.members[0].name == "Solo"


class TestSampleRoster:
    def test_thirteen_full_teams(self):
        roster = create_sample_roster()
        assert len(roster) == 13
        assert roster[0].name == "Team Alpha"
        assert [member.hp for member in roster[0].members] == [95, 88, 92, 85]
        assert len({team.id for team in roster}) == 13


class TestJson:
    def test_export_keeps_names_and_recorded_members_only(self, make_team):
        payload = json.loads(export_teams_as_json([make_team("Alpha", 100, 20, 5, (90, 80))]))

        assert payload["version"] == EXPORT_FORMAT_VERSION
        assert "exportDate" in payload
        assert payload["teams"] == [{
            "name": "Alpha",
            "members": [{"name": "Alpha #1", "hp": 90}, {"name": "Alpha #2", "hp": 80}],
        }]

    def test_import_versioned_file(self, make_team):
        exported = export_teams_as_json([make_team("Alpha"), make_team("Beta")])
        assert [team["name"] for team in import_teams_from_json(exported)] == ["Alpha", "Beta"]

    def test_import_bare_list(self):
        assert import_teams_from_json('[{"name": "Solo"}]') == [{"name": "Solo"}]

    @pytest.mark.parametrize("payload", [
        "not json",
        '{"version": "0.1", "teams": []}',
        '{"teams": "nope"}',
        '[1, 2]',
    ])
    def test_import_rejects_unknown_formats(self, payload):
        with pytest.raises(RosterImportError):
            import_teams_from_json(payload)

    @pytest.mark.parametrize("payload", [
        '[{"name": "X", "members": ["Alice"]}]',
        '[{"name": "X", "members": 5}]',
        '{"version": "1.0", "teams": [{"name": "X", "members": {"name": "Alice"}}]}',
    ])
    def test_import_rejects_malformed_members(self, payload):
        with pytest.raises(RosterImportError):
            import_teams_from_json(payload)

    def test_import_allows_missing_or_null_members(self):
        teams = import_teams_from_json('[{"name": "A"}, {"name": "B", "members": null}]')
        assert [team["name"] for team in teams] == ["A", "B"]


class TestRosterOperations:
    def test_empty_database_is_seeded(self, with_database):
        async def scenario(db):
            ops = RosterOperations(db)
            return await ops.load_roster()

        roster = with_database(scenario)
        assert len(roster) == 1
        assert roster[0].name == ""

    def test_edits_recompute_leaderboards(self, with_database):
        async def scenario(db):
            service = LeaderboardService(reveal_delay=0)
            ops = RosterOperations(db, service)
            team = (await ops.load_roster())[0]

            await ops.set_team_field(team.id, "name", "Rockets")
            await ops.set_team_field(team.id, "final_amount", "250000")
            await ops.set_team_field(team.id, "play_time_minutes", "35")
            await ops.set_team_field(team.id, "level", "5")
            for slot, hp in enumerate((95, 88, 92, 85), start=1):
                await ops.set_member_field(team.id, slot, "name", f"Pilot {slot}")
                await ops.set_member_field(team.id, slot, "hp", str(hp))
            return service, await ops.get_team(team.id)

        service, team = with_database(scenario)
        assert team.name == "Rockets"
        assert team.final_amount == 250000
        assert team.level == 5
        assert [member.hp for member in team.members] == [95, 88, 92, 85]
        assert service.master_score(team.id) == pytest.approx(250000 / 35 * 360 * 5)
        assert service.get_board(AwardConstants.TIME_ATTACK).ranking[0].qualified

    def test_member_ids_survive_edits(self, with_database):
        async def scenario(db):
            ops = RosterOperations(db)
            team = (await ops.load_roster())[0]
            updated = await ops.set_member_field(team.id, 2, "name", "Medic")
            return team, updated

        before, after = with_database(scenario)
        assert [member.id for member in before.members] == [member.id for member in after.members]
        assert after.members[1].name == "Medic"

    def test_clearing_a_number_makes_it_absent(self, with_database):
        async def scenario(db):
            ops = RosterOperations(db)
            team = (await ops.load_roster())[0]
            await ops.set_team_field(team.id, "final_amount", "100")
            return await ops.set_team_field(team.id, "final_amount", "")

        assert with_database(scenario).final_amount is None

    def test_out_of_range_edits_are_clamped(self, with_database):
        async def scenario(db):
            ops = RosterOperations(db)
            team = (await ops.load_roster())[0]
            await ops.set_team_field(team.id, "final_amount", "-5")
            await ops.set_team_field(team.id, "play_time_minutes", "12000")
            return await ops.set_member_field(team.id, 1, "hp", "20000")

        team = with_database(scenario)
        assert team.final_amount == 0
        assert team.play_time_minutes == RosterConstants.MAX_INPUT_VALUE
        assert team.members[0].hp == RosterConstants.MAX_INPUT_VALUE

    def test_invalid_edits(self, with_database):
        async def scenario(db):
            ops = RosterOperations(db)
            team = (await ops.load_roster())[0]
            with pytest.raises(InvalidFieldError):
                await ops.set_team_field(team.id, "color", "red")
            with pytest.raises(MemberSlotError):
                await ops.set_member_field(team.id, 5, "name", "Extra")
            with pytest.raises(TeamNotFoundError):
                await ops.set_team_field("missing", "name", "Ghost")

        with_database(scenario)

    def test_add_and_remove_keep_roster_order(self, with_database):
        async def scenario(db):
            ops = RosterOperations(db)
            first = (await ops.load_roster())[0]
            second = await ops.add_team("Second")
            third = await ops.add_team("Third")
            await ops.remove_team(second.id)
            return first, third, await ops.load_roster()

        first, third, roster = with_database(scenario)
        assert [team.id for team in roster] == [first.id, third.id]

    def test_last_team_cannot_be_removed(self, with_database):
        async def scenario(db):
            ops = RosterOperations(db)
            team = (await ops.load_roster())[0]
            with pytest.raises(LastTeamError):
                await ops.remove_team(team.id)
            return await db.count_teams()

        assert with_database(scenario) == 1

    def test_reset_replaces_roster(self, with_database):
        async def scenario(db):
            ops = RosterOperations(db)
            await ops.load_roster()
            await ops.add_team("Extra")
            return await ops.reset_roster()

        roster = with_database(scenario)
        assert len(roster) == 1
        assert roster[0].name == ""

    def test_templates(self, with_database):
        async def scenario(db):
            ops = RosterOperations(db)
            team = (await ops.load_roster())[0]
            await ops.set_team_field(team.id, "name", "Rockets")
            await ops.set_member_field(team.id, 1, "name", "Pilot")
            await ops.set_member_field(team.id, 1, "hp", "90")
            await ops.set_team_field(team.id, "final_amount", "5000")

            template = await ops.save_template(team.id, "Regulars")
            added = await ops.add_team_from_template(template.id)
            templates = await ops.list_templates()
            await ops.delete_template(template.id)
            with pytest.raises(TemplateNotFoundError):
                await ops.delete_template(template.id)
            with pytest.raises(TemplateNotFoundError):
                await ops.add_team_from_template(template.id)
            return added, templates, await ops.list_templates()

        added, templates, remaining = with_database(scenario)
        assert [template.name for template in templates] == ["Regulars"]
        assert templates[0].members == [{"name": "Pilot", "hp": 90}]
        assert added.name == "Rockets"
        assert added.final_amount is None
        assert added.members[0].name == "Pilot"
        assert len(added.members) == 4
        assert remaining == []

    def test_import_appends_teams(self, with_database, make_team):
        exported = export_teams_as_json([make_team("Alpha", 1, 1, 5, (90,)), make_team("Beta")])

        async def scenario(db):
            service = LeaderboardService(reveal_delay=0)
            ops = RosterOperations(db, service)
            await ops.load_roster()
            imported = await ops.import_roster(exported)
            return imported, await ops.load_roster(), service

        imported, roster, service = with_database(scenario)
        assert len(imported) == 2
        assert [team.name for team in roster] == ["", "Alpha", "Beta"]
        assert roster[1].final_amount is None
        assert roster[1].members[0].hp == 90
        assert len(service.get_board(AwardConstants.COLLECTION).ranking) == 3

    def test_import_failure_leaves_roster_untouched(self, with_database):
        async def scenario(db):
            ops = RosterOperations(db)
            await ops.load_roster()
            with pytest.raises(RosterImportError):
                await ops.import_roster("{broken")
            with pytest.raises(RosterImportError):
                await ops.import_roster('[{"name": "X", "members": ["Alice"]}]')
            return await db.count_teams()

        assert with_database(scenario) == 1

    def test_export_round_trips_names(self, with_database):
        async def scenario(db):
            ops = RosterOperations(db)
            team = (await ops.load_roster())[0]
            await ops.set_team_field(team.id, "name", "Rockets")
            return await ops.export_roster()

        payload = json.loads(with_database(scenario))
        assert payload["teams"] == [{"name": "Rockets", "members": []}]
