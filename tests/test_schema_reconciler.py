"""
Tests for specialist record reconciliation across stored layouts.
"""
import pytest

from freeexperience.modules.marketplace.domain.models.specialist import (
    PortfolioProject,
    Specialization,
    SpecialistProfile,
    derive_portfolio_preview,
)
from freeexperience.modules.marketplace.domain.services.schema_reconciler import (
    RecordVariant,
    denormalize,
    normalize,
    split_display_name,
    tag_record,
)


class TestTagRecord:

    def test_remote_row_is_detected_by_snake_case_name(self):
        assert tag_record({"id": "1", "first_name": "Анна"}).variant == RecordVariant.REMOTE_ROW

    def test_split_name_wins_over_combined_name(self):
        record = tag_record({"id": "1", "firstName": "Анна", "name": "Анна Смирнова"})
        assert record.variant == RecordVariant.LOCAL_SPLIT_NAME

    def test_combined_name_is_legacy(self):
        assert tag_record({"id": "1", "name": "Иван Петров"}).variant == RecordVariant.LEGACY_COMBINED_NAME

    def test_unknown_shapes_default_to_local(self):
        assert tag_record({"id": "1"}).variant == RecordVariant.LOCAL_SPLIT_NAME
        assert tag_record("not a record").variant == RecordVariant.LOCAL_SPLIT_NAME


class TestSplitDisplayName:

    @pytest.mark.parametrize("text,expected", [
        ("Иван Петров", ("Иван", "Петров")),
        ("  Мария   Анна  Кузнецова ", ("Мария", "Анна Кузнецова")),
        ("Ольга", ("Ольга", "")),
        ("", ("", "")),
        (None, ("", "")),
    ])
    def test_splits_on_first_whitespace(self, text, expected):
        assert split_display_name(text) == expected


class TestNormalize:

    def test_legacy_record_splits_name(self):
        profile = normalize({"id": "u1", "name": "Иван Петров", "specialization": "SMM"})

        assert profile.first_name == "Иван"
        assert profile.last_name == "Петров"
        assert profile.specialization == Specialization.SMM

    def test_remote_row_fields(self):
        profile = normalize({
            "id": "u2",
            "first_name": "Анна",
            "last_name": "Смирнова",
            "specialization": "Веб-разработка",
            "bio": "Фронтенд",
            "telegram": "@anna",
            "email": "anna@mail.ru",
            "avatar_url": "https://cdn.example.com/a.png",
            "show_in_search": False,
            "portfolio": [],
        })

        assert profile.full_name == "Анна Смирнова"
        assert profile.specialization == Specialization.WEB_DEVELOPMENT
        assert profile.telegram_handle == "@anna"
        assert profile.contact_email == "anna@mail.ru"
        assert profile.visible_in_search is False
        assert profile.rating == 0.0
        assert profile.hired_count == 0

    def test_local_record_fields(self):
        profile = normalize({
            "id": "u3",
            "firstName": "Олег",
            "lastName": "Иванов",
            "avatarUrl": "/avatars/o.png",
            "showInSearch": True,
            "rating": 4.5,
            "hiredCount": 3,
        })

        assert profile.first_name == "Олег"
        assert profile.avatar_url == "/avatars/o.png"
        assert profile.rating == 4.5
        assert profile.hired_count == 3

    def test_missing_and_malformed_fields_take_defaults(self):
        profile = normalize({
            "firstName": 42,
            "specialization": "Astrology",
            "showInSearch": "yes",
            "projects": "nope",
            "rating": "high",
            "hiredCount": True,
        }, fallback_id="fallback")

        assert profile.id == "fallback"
        assert profile.first_name == ""
        assert profile.specialization == Specialization.DESIGN
        assert profile.visible_in_search is True
        assert profile.portfolio_items == []
        assert profile.rating == 0.0
        assert profile.hired_count == 0

    def test_numeric_ids_are_read_as_text(self):
        profile = normalize({"id": 7, "firstName": "Ира", "projects": [{"id": 5, "title": "Лого"}]})

        assert profile.id == "7"
        assert profile.portfolio_items[0].id == "5"

    def test_portfolio_is_truncated_to_three_by_three(self):
        projects = [
            {"id": str(n), "title": f"Проект {n}", "images": [f"https://img/{n}/{i}.png" for i in range(5)]}
            for n in range(5)
        ]

        profile = normalize({"id": "u4", "firstName": "Яна", "projects": projects})

        assert [item.id for item in profile.portfolio_items] == ["0", "1", "2"]
        assert all(len(item.images) == 3 for item in profile.portfolio_items)

    def test_image_objects_and_strings_are_both_read(self):
        profile = normalize({
            "id": "u5",
            "firstName": "Лев",
            "projects": [{
                "title": "Сайт",
                "images": [{"url": "https://img/a.png"}, "https://img/b.png", {"alt": "no url"}, ""],
            }],
        })

        item = profile.portfolio_items[0]
        assert item.id == "1"
        assert item.images == ["https://img/a.png", "https://img/b.png"]

    def test_non_mapping_portfolio_entries_are_skipped(self):
        profile = normalize({"id": "u6", "firstName": "Ян", "projects": ["junk", None, {"title": "Ок"}]})

        assert [item.title for item in profile.portfolio_items] == ["Ок"]

    def test_non_mapping_record_gives_empty_profile(self):
        profile = normalize(None, fallback_id="x")

        assert profile.id == "x"
        assert profile.first_name == ""


class TestDenormalize:

    @pytest.fixture
    def profile(self):
        return SpecialistProfile(
            id="u7",
            first_name="Иван",
            last_name="Петров",
            specialization=Specialization.SMM,
            bio="Веду соцсети",
            telegram_handle="@ivan",
            contact_email="ivan@mail.ru",
            portfolio_items=[PortfolioProject(id="p1", title="Кейс", images=["https://img/1.png"])],
            rating=4.0,
            hired_count=2,
        )

    @pytest.mark.parametrize("variant", list(RecordVariant))
    def test_each_layout_reads_back_to_the_same_profile(self, profile, variant):
        stored = denormalize(profile, variant)
        restored = normalize(stored)

        assert tag_record(stored).variant == variant
        assert restored.full_name == profile.full_name
        assert restored.portfolio_items == profile.portfolio_items
        assert restored.specialization == profile.specialization
        assert restored.contact_email == profile.contact_email

    def test_remote_row_has_no_rating_columns(self, profile):
        row = denormalize(profile, RecordVariant.REMOTE_ROW)

        assert "rating" not in row
        assert "hired_count" not in row
        assert row["portfolio"][0]["images"] == [{"url": "https://img/1.png"}]

    def test_legacy_layout_writes_combined_name(self, profile):
        stored = denormalize(profile, RecordVariant.LEGACY_COMBINED_NAME)

        assert stored["name"] == "Иван Петров"
        assert "firstName" not in stored


class TestPortfolioPreview:

    def test_inline_and_protocol_relative_urls_are_excluded(self):
        items = [PortfolioProject(id="1", images=[
            "data:image/png;base64,AAAA",
            "//cdn.example.com/x.png",
            "/uploads/ok.png",
        ])]

        assert derive_portfolio_preview(items) == ["/uploads/ok.png"]

    def test_preview_is_capped_at_five(self):
        items = [
            PortfolioProject(id=str(n), images=[f"https://img/{n}/{i}.png" for i in range(3)])
            for n in range(3)
        ]

        preview = derive_portfolio_preview(items)

        assert len(preview) == 5
        assert preview[0] == "https://img/0/0.png"
        assert preview[-1] == "https://img/1/1.png"

    def test_profile_exposes_preview(self):
        profile = SpecialistProfile(
            id="u8",
            portfolio_items=[PortfolioProject(id="1", images=["https://img/a.png"])],
        )

        assert profile.portfolio_preview_images == ["https://img/a.png"]
