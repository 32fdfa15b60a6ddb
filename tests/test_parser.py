from datetime import date, datetime, timedelta

import pytest
import pytz

from smart_tasks.schemas import Category, Priority, Recurrence
from smart_tasks.services.parser import Parser, ParseResult, get_parser, parse

# A Wednesday
REFERENCE = date(2026, 1, 14)


def day(month: int, dom: int, year: int = 2026) -> datetime:
    return datetime(year, month, dom)


class TestParse:
    def setup_method(self):
        self.parser = Parser(timezone="UTC")

    def test_urgent_report(self):
        result = self.parser.parse("Urgent: finish report", REFERENCE)
        assert result.priority == Priority.HIGH
        assert result.category == Category.WORK
        assert result.due_date is None
        assert result.due_time is None

    def test_buy_milk_tomorrow_at_3pm(self):
        result = self.parser.parse("Buy milk tomorrow at 3pm", REFERENCE)
        assert result.category == Category.SHOPPING
        assert result.due_date == day(1, 15)
        assert result.due_time == "15:00"
        assert result.title == "Buy milk"

    def test_gym_every_day(self):
        result = self.parser.parse("Gym workout every day", REFERENCE)
        assert result.category == Category.HEALTH
        assert result.recurring == Recurrence.DAILY
        assert result.title == "Gym workout"

    def test_pay_rent_on_past_date_rolls_to_next_year(self):
        result = self.parser.parse("Pay rent on 1/1", REFERENCE)
        assert result.category == Category.FINANCE
        assert result.due_date == day(1, 1, 2027)

    def test_pay_rent_on_future_date_stays_this_year(self):
        result = self.parser.parse("Pay rent on 2/1", REFERENCE)
        assert result.due_date == day(2, 1)

    def test_in_days_overrides_tomorrow(self):
        result = self.parser.parse("tomorrow or maybe in 3 days", REFERENCE)
        assert result.due_date == day(1, 17)

    def test_time_word_overrides_clock_time(self):
        result = self.parser.parse("Meeting at 3pm in the evening", REFERENCE)
        assert result.due_time == "18:00"
        assert result.title == "Meeting in the evening"

    def test_empty_input(self):
        result = self.parser.parse("", REFERENCE)
        assert result == ParseResult(title="")
        assert result.category == Category.OTHER
        assert result.priority == Priority.MEDIUM
        assert result.due_date is None
        assert result.due_time is None
        assert result.recurring == Recurrence.NONE

    @pytest.mark.parametrize(
        "text",
        [
            "   ",
            "!!!",
            "urgent",
            "tomorrow",
            "at on at on",
            "99/99 in 999999999999 days 99:99pm",
            "Ünïcödé ３pm ٣/٤",
            "in 0 days",
        ],
    )
    def test_never_raises_and_always_classifies(self, text):
        result = self.parser.parse(text, REFERENCE)
        assert isinstance(result.category, Category)
        assert isinstance(result.priority, Priority)
        assert isinstance(result.recurring, Recurrence)
        assert isinstance(result.title, str)

    def test_title_never_empty_for_consumed_keyword(self):
        assert self.parser.parse("urgent", REFERENCE).title == "Urgent"
        assert self.parser.parse("tomorrow", REFERENCE).title == "Tomorrow"
        assert self.parser.parse("  daily ", REFERENCE).title == "Daily"

    def test_reparsing_clean_title_does_not_fail(self):
        first = self.parser.parse("Buy milk tomorrow at 3pm", REFERENCE)
        second = self.parser.parse(first.title, REFERENCE)
        assert second.title == "Buy milk"

    def test_reference_accepts_datetime(self):
        result = self.parser.parse("tomorrow", datetime(2026, 1, 14, 23, 59))
        assert result.due_date == day(1, 15)

    def test_default_reference_uses_configured_timezone(self):
        result = Parser(timezone="America/Los_Angeles").parse("today")
        now = datetime.now(pytz.timezone("America/Los_Angeles"))
        assert result.due_date.date() in (now.date(), now.date() + timedelta(days=1))
        assert result.due_date.hour == 0

    def test_to_dict(self):
        result = self.parser.parse("Buy milk tomorrow at 3pm weekly", REFERENCE)
        assert result.to_dict() == {
            "title": "Buy milk",
            "category": "Shopping",
            "priority": "Medium",
            "due_date": "2026-01-15T00:00:00",
            "due_time": "15:00",
            "recurring": "weekly",
        }

    def test_module_level_parse_uses_shared_parser(self):
        assert get_parser() is get_parser()
        assert parse("Call client tomorrow", REFERENCE).due_date == day(1, 15)


class TestClassifyCategory:
    def setup_method(self):
        self.parser = Parser(timezone="UTC")

    @pytest.mark.parametrize(
        "text,expected",
        [
            ("Prepare presentation", Category.WORK),
            ("Lunch with a friend", Category.PERSONAL),
            ("Dentist checkup", Category.HEALTH),
            ("Pay electricity bill", Category.FINANCE),
            ("Pick up groceries", Category.SHOPPING),
            ("Walk the dog", Category.OTHER),
        ],
    )
    def test_keywords(self, text, expected):
        assert self.parser.classify_category(text) == expected

    def test_case_insensitive(self):
        assert self.parser.classify_category("CLIENT DEMO") == Category.WORK

    def test_declaration_order_breaks_ties(self):
        # Work is checked before Finance
        assert self.parser.classify_category("meeting about tax") == Category.WORK

    def test_substring_matches_inside_words(self):
        assert self.parser.classify_category("Don't forget the umbrella") == Category.SHOPPING
        assert self.parser.classify_category("Recall the plan") == Category.WORK

    def test_injected_keywords(self):
        parser = Parser(timezone="UTC", category_keywords={Category.HEALTH: ["yoga"]})
        assert parser.classify_category("yoga class") == Category.HEALTH
        assert parser.classify_category("team meeting") == Category.OTHER


class TestClassifyPriority:
    def setup_method(self):
        self.parser = Parser(timezone="UTC")

    def test_high(self):
        assert self.parser.classify_priority("ASAP send invoice") == Priority.HIGH
        assert self.parser.classify_priority("I must call") == Priority.HIGH

    def test_low(self):
        assert self.parser.classify_priority("maybe read a book") == Priority.LOW
        assert self.parser.classify_priority("tidy desk if time allows") == Priority.LOW

    def test_high_beats_low(self):
        assert self.parser.classify_priority("maybe urgent") == Priority.HIGH

    def test_default_medium(self):
        assert self.parser.classify_priority("Read a book") == Priority.MEDIUM


class TestExtractDate:
    def setup_method(self):
        self.parser = Parser(timezone="UTC")

    def extract(self, text, today=REFERENCE):
        return self.parser.extract_date(text, today)

    def test_no_date(self):
        assert self.extract("Read a book") is None

    def test_tomorrow(self):
        assert self.extract("Call mom tomorrow") == day(1, 15)

    def test_today(self):
        assert self.extract("Finish it TODAY") == day(1, 14)

    def test_next_week(self):
        assert self.extract("Plan trip next week") == day(1, 21)

    def test_weekend_is_next_saturday(self):
        assert self.extract("Clean garage this weekend") == day(1, 17)

    def test_weekend_on_saturday_skips_to_following_saturday(self):
        assert self.extract("weekend hike", date(2026, 1, 17)) == day(1, 24)

    def test_saturday(self):
        assert self.extract("Party on saturday") == day(1, 17)

    def test_sunday_resolves_to_next_saturday(self):
        assert self.extract("Brunch on sunday") == day(1, 17)

    def test_weekday(self):
        assert self.extract("Call mom Friday") == day(1, 16)

    def test_same_weekday_advances_a_week(self):
        assert self.extract("Standup wednesday") == day(1, 21)

    def test_first_weekday_in_sunday_first_order_wins(self):
        assert self.extract("friday or monday") == day(1, 19)

    def test_first_relative_phrase_wins(self):
        assert self.extract("tomorrow or next week") == day(1, 15)
        assert self.extract("today, no, friday") == day(1, 14)
        assert self.extract("tomorrow, not friday") == day(1, 15)
        assert self.extract("next week, or this weekend") == day(1, 21)

    def test_in_days_overwrites_relative_phrase(self):
        assert self.extract("friday, or in 5 days") == day(1, 19)
        assert self.extract("next week in 2 days") == day(1, 16)

    def test_in_days(self):
        assert self.extract("Renew passport in 10 days") == day(1, 24)
        assert self.extract("in 1 day") == day(1, 15)

    def test_in_days_out_of_range_is_ignored(self):
        assert self.extract("in 99999999999 days") is None
        assert self.extract("tomorrow, in 99999999999 days") == day(1, 15)

    def test_month_day(self):
        assert self.extract("Dentist 3/15") == day(3, 15)
        assert self.extract("Dentist 3-15") == day(3, 15)

    def test_month_day_today_is_not_rolled(self):
        assert self.extract("1/14") == day(1, 14)

    def test_month_day_always_wins(self):
        assert self.extract("12/25 tomorrow in 2 days") == day(12, 25)

    def test_month_day_rolls_over_out_of_range_values(self):
        assert self.extract("13/1") == day(1, 1, 2027)
        assert self.extract("2/30") == day(3, 2)
        assert self.extract("3/0") == day(2, 28)

    def test_month_day_feb_29_rolls_to_march_first(self):
        assert self.extract("2/29", date(2028, 3, 1)) == day(3, 1, 2029)

    def test_year_end_arithmetic(self):
        assert self.extract("tomorrow", date(2026, 12, 31)) == day(1, 1, 2027)


class TestExtractTime:
    def setup_method(self):
        self.parser = Parser(timezone="UTC")

    @pytest.mark.parametrize(
        "text,expected",
        [
            ("at 3pm", "15:00"),
            ("at 3 PM", "15:00"),
            ("9:30am", "09:30"),
            ("9:30 AM", "09:30"),
            ("12pm", "12:00"),
            ("12am", "00:00"),
            ("11:45pm", "23:45"),
            ("14:30", "14:30"),
            ("0:05", "00:05"),
        ],
    )
    def test_clock_times(self, text, expected):
        assert self.parser.extract_time(text) == expected

    def test_no_time(self):
        assert self.parser.extract_time("Buy milk") is None

    def test_invalid_24_hour_time(self):
        assert self.parser.extract_time("25:00") is None
        assert self.parser.extract_time("10:75") is None

    def test_invalid_12_hour_time(self):
        assert self.parser.extract_time("13pm") is None

    def test_12_hour_pattern_blocks_24_hour_pattern(self):
        assert self.parser.extract_time("5pm or 14:30") == "17:00"

    @pytest.mark.parametrize(
        "text,expected",
        [
            ("lunch at noon", "12:00"),
            ("at midnight", "00:00"),
            ("morning run", "09:00"),
            ("evening walk", "18:00"),
            ("tonight", "20:00"),
        ],
    )
    def test_time_words(self, text, expected):
        assert self.parser.extract_time(text) == expected

    def test_afternoon_matches_noon_first(self):
        assert self.parser.extract_time("afternoon nap") == "12:00"

    def test_time_word_overrides_24_hour_time(self):
        assert self.parser.extract_time("10:30 in the morning") == "09:00"


class TestDetectRecurrence:
    def setup_method(self):
        self.parser = Parser(timezone="UTC")

    @pytest.mark.parametrize(
        "text,expected",
        [
            ("Daily standup", Recurrence.DAILY),
            ("water plants every day", Recurrence.DAILY),
            ("weekly review", Recurrence.WEEKLY),
            ("call mom every week", Recurrence.WEEKLY),
            ("pay rent every month", Recurrence.MONTHLY),
            ("Monthly report", Recurrence.MONTHLY),
            ("one-off errand", Recurrence.NONE),
        ],
    )
    def test_keywords(self, text, expected):
        assert self.parser.detect_recurrence(text) == expected

    def test_daily_checked_first(self):
        assert self.parser.detect_recurrence("monthly report every day") == Recurrence.DAILY


class TestCleanTitle:
    def setup_method(self):
        self.parser = Parser(timezone="UTC")

    @pytest.mark.parametrize(
        "text,expected",
        [
            ("urgent call client", "Call client"),
            ("Submit report in 3 days", "Submit report"),
            ("Standup 9:30am daily", "Standup"),
            ("review PR at 14:30", "Review PR"),
            ("clean garage this weekend", "Clean garage"),
            ("plan trip next week", "Plan trip"),
            ("call mom every week at 6 pm", "Call mom"),
        ],
    )
    def test_strips_parsed_fragments(self, text, expected):
        assert self.parser.clean_title(text) == expected

    def test_keeps_weekdays_and_weekend_words(self):
        assert self.parser.clean_title("Dinner on saturday") == "Dinner saturday"
        assert self.parser.clean_title("gym friday") == "Gym friday"

    def test_priority_words_are_whole_word(self):
        assert self.parser.clean_title("prioritize inbox") == "Prioritize inbox"

    def test_collapses_whitespace(self):
        assert self.parser.clean_title("  buy   milk\ttoday  ") == "Buy milk"

    def test_empty(self):
        assert self.parser.clean_title("") == ""
