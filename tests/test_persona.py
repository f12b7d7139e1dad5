from __future__ import annotations

import unittest
from datetime import datetime, timezone

from git_story.archetype import ARCHETYPE_RULES, DEFAULT_ARCHETYPE, calculate_archetype
from git_story.models import ActivityEvent, ActivityKind, CommunityStats, ContributionBreakdown, Productivity
from git_story.productivity import calculate_productivity, hour_histogram, time_of_day

QUIET = CommunityStats(followers=0, following=0, public_repos=0, total_stars=0)
AFTERNOON = Productivity(time_of_day="Afternoon", peak_hour=14)
WEEKDAYS = [0, 10, 10, 10, 10, 10, 0]


class ProductivityTests(unittest.TestCase):
    def test_histogram_and_peak(self) -> None:
        events = [
            ActivityEvent(datetime(2025, 1, 1, hour, tzinfo=timezone.utc), ActivityKind.COMMIT, 3)
            for hour in (9, 9, 23, 9, 23)
        ]
        histogram = hour_histogram(events)
        self.assertEqual(histogram[9], 3)
        self.assertEqual(histogram[23], 2)
        self.assertEqual(calculate_productivity(histogram), Productivity("Morning", 9))

    def test_default_peak_without_events(self) -> None:
        self.assertEqual(calculate_productivity([0] * 24), Productivity("Afternoon", 14))

    def test_ties_keep_the_earliest_hour(self) -> None:
        histogram = [0] * 24
        histogram[18] = 4
        histogram[2] = 4
        self.assertEqual(calculate_productivity(histogram).peak_hour, 2)

    def test_time_of_day_boundaries(self) -> None:
        labels = {hour: time_of_day(hour) for hour in (4, 5, 11, 12, 16, 17, 20, 21, 0)}
        self.assertEqual(
            labels,
            {
                4: "Late Night",
                5: "Morning",
                11: "Morning",
                12: "Afternoon",
                16: "Afternoon",
                17: "Evening",
                20: "Evening",
                21: "Late Night",
                0: "Late Night",
            },
        )


class ArchetypeTests(unittest.TestCase):
    def archetype(
        self,
        breakdown: ContributionBreakdown = ContributionBreakdown(commits=100),
        community: CommunityStats = QUIET,
        total: int = 100,
        peak_hour: int = 14,
        weekdays=WEEKDAYS,
    ) -> str:
        productivity = Productivity(time_of_day="", peak_hour=peak_hour)
        return calculate_archetype(breakdown, community, total, productivity, weekdays)

    def test_first_matching_rule_wins(self) -> None:
        # PR share 25% and review share 15%: rule 1 wins over rule 2.
        breakdown = ContributionBreakdown(commits=60, prs=25, issues=0, reviews=15)
        self.assertEqual(self.archetype(breakdown, peak_hour=23), "The Collaboration Maestro")

    def test_review_share(self) -> None:
        breakdown = ContributionBreakdown(commits=80, prs=5, issues=0, reviews=15)
        self.assertEqual(self.archetype(breakdown), "The Quality Guardian")

    def test_peak_hour_rules(self) -> None:
        self.assertEqual(self.archetype(peak_hour=22), "The Midnight Architect")
        self.assertEqual(self.archetype(peak_hour=4), "The Midnight Architect")
        self.assertEqual(self.archetype(peak_hour=5), "The Dawn Coder")
        self.assertEqual(self.archetype(peak_hour=11), "The Dawn Coder")

    def test_weekend_share(self) -> None:
        self.assertEqual(self.archetype(weekdays=[20, 5, 5, 5, 5, 5, 20]), "The Passion Programmer")

    def test_volume_rules(self) -> None:
        self.assertEqual(self.archetype(total=1200), "The Relentless Builder")
        self.assertEqual(self.archetype(total=400), "The Steady Craftsman")

    def test_issue_share(self) -> None:
        breakdown = ContributionBreakdown(commits=80, prs=0, issues=20, reviews=0)
        self.assertEqual(self.archetype(breakdown), "The Visionary Planner")

    def test_open_source_star(self) -> None:
        famous = CommunityStats(followers=10, following=0, public_repos=3, total_stars=1000)
        self.assertEqual(self.archetype(community=famous), "The Open Source Star")

    def test_default(self) -> None:
        self.assertEqual(self.archetype(), DEFAULT_ARCHETYPE)

    def test_zero_activity(self) -> None:
        result = calculate_archetype(ContributionBreakdown(), QUIET, 0, AFTERNOON, [0] * 7)
        self.assertEqual(result, "The Curious Explorer")

    def test_rule_order(self) -> None:
        labels = [label for _, label in ARCHETYPE_RULES]
        self.assertEqual(labels[0], "The Collaboration Maestro")
        self.assertEqual(labels[-1], "The Open Source Star")
        self.assertEqual(len(labels), 9)


if __name__ == "__main__":  # pragma: no cover
    unittest.main()
