"""Tests for JobSearchService."""

from __future__ import annotations

from unittest.mock import AsyncMock

import pytest

from job_match_core.config.settings import Settings
from job_match_core.exceptions import NotFoundError, ValidationError
from job_match_core.models.job import JobPosting
from job_match_core.models.search import JobSearchFilters
from job_match_engine.search.service import JobSearchService
from job_match_infra.memory_store import InMemoryJobStore
from tests.mocks.mock_cache import MemoryCache
from tests.mocks.mock_factories import days_ago, make_application, make_job, make_store


@pytest.fixture
def service(store: InMemoryJobStore, settings: Settings) -> JobSearchService:
    """Return a service over the sample board with no providers."""
    return JobSearchService(store, settings)


@pytest.mark.unit
class TestSearch:
    """Test JobSearchService.search."""

    @pytest.mark.asyncio
    async def test_facets_follow_filters(self, settings: Settings) -> None:
        """Remote jobs paying 50k+ are counted; the rest stay out of the facets."""
        jobs = [
            make_job(id=1, work_arrangement="remote", salary_min=50000, salary_max=70000),
            make_job(id=2, work_arrangement="remote", salary_min=60000, salary_max=90000),
            make_job(id=3, work_arrangement="remote", salary_min=90000, salary_max=120000),
            make_job(id=4, work_arrangement="onsite", salary_min=80000, salary_max=90000),
            make_job(id=5, work_arrangement="remote", salary_min=30000, salary_max=40000),
        ]
        service = JobSearchService(make_store(jobs=jobs), settings)

        response = await service.search({"work_arrangement": "remote", "salary_min": 50000})

        assert response.total == 3
        assert {hit.job.id for hit in response.items} == {1, 2, 3}
        assert [(f.value, f.count) for f in response.facets.work_arrangements] == [("remote", 3)]

    @pytest.mark.asyncio
    async def test_pagination(self, service: JobSearchService) -> None:
        """Pages are 1-indexed and the page count rounds up."""
        first = await service.search(page=1, limit=2)
        second = await service.search(page=2, limit=2)

        assert first.total == 3
        assert first.pages == 2
        assert [hit.job.id for hit in first.items] == [1, 2]
        assert [hit.job.id for hit in second.items] == [3]

    @pytest.mark.asyncio
    async def test_default_page_size(self, service: JobSearchService) -> None:
        """Without a limit the configured default applies."""
        response = await service.search()
        assert response.limit == 20

    @pytest.mark.asyncio
    async def test_relevance_sort(self, service: JobSearchService) -> None:
        """Title hits outrank description-only hits."""
        response = await service.search(JobSearchFilters(query="developer", sort_by="relevance"))
        assert [hit.job.id for hit in response.items] == [1, 3]

    @pytest.mark.parametrize(
        "filters",
        [
            {"salary_min": -1},
            {"salary_min": 90000, "salary_max": 50000},
            {"work_arrangement": "space"},
            {"colour": "red"},
            {"posted_within": "decade"},
        ],
    )
    @pytest.mark.asyncio
    async def test_invalid_filters_rejected_before_store(
        self, settings: Settings, filters: dict[str, object]
    ) -> None:
        """Malformed filters raise ValidationError without a store read."""
        store = AsyncMock()
        with pytest.raises(ValidationError):
            await JobSearchService(store, settings).search(filters)
        store.search_jobs.assert_not_awaited()

    @pytest.mark.parametrize(("page", "limit"), [(0, 10), (1, 0), (1, 101)])
    @pytest.mark.asyncio
    async def test_invalid_paging(self, settings: Settings, page: int, limit: int) -> None:
        """Page below 1 or limit outside 1..max raises ValidationError."""
        store = AsyncMock()
        with pytest.raises(ValidationError):
            await JobSearchService(store, settings).search(page=page, limit=limit)
        store.search_jobs.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_personalized_search(
        self, sample_jobs: list[JobPosting], settings: Settings
    ) -> None:
        """Hits carry scores and applied flags; recommendations skip the page."""
        store = make_store(jobs=sample_jobs, applications=[make_application(job_id=2)])
        service = JobSearchService(store, settings)

        response = await service.search(candidate_id=1, limit=1)

        hit = response.items[0]
        assert hit.job.id == 1
        assert hit.match_score == 100
        assert hit.is_applied is False
        rec_ids = [job.id for job in response.recommendations]
        assert 1 not in rec_ids
        assert 2 not in rec_ids
        assert len(rec_ids) <= settings.search_recommendations

    @pytest.mark.asyncio
    async def test_recommendations_beyond_a_full_page(self, settings: Settings) -> None:
        """A page as large as the scoring pool still leaves picks from later postings."""
        size = settings.recommendation_pool_size
        jobs = [make_job(id=i, published_at=days_ago(i / 100)) for i in range(1, size + 31)]
        service = JobSearchService(make_store(jobs=jobs), settings)

        response = await service.search({}, candidate_id=1, page=1, limit=size)

        page_ids = {hit.job.id for hit in response.items}
        rec_ids = [job.id for job in response.recommendations]
        assert response.total == size + 30
        assert len(rec_ids) == settings.search_recommendations
        assert not page_ids & set(rec_ids)

    @pytest.mark.asyncio
    async def test_applied_flag(self, sample_jobs: list[JobPosting], settings: Settings) -> None:
        """A job the candidate applied to is flagged."""
        store = make_store(jobs=sample_jobs, applications=[make_application(job_id=2)])
        response = await JobSearchService(store, settings).search(candidate_id=1)
        flags = {hit.job.id: hit.is_applied for hit in response.items}
        assert flags == {1: False, 2: True, 3: False}

    @pytest.mark.asyncio
    async def test_anonymous_search_has_no_scores(self, service: JobSearchService) -> None:
        """Without a candidate there are no scores or recommendations."""
        response = await service.search()
        assert all(hit.match_score is None for hit in response.items)
        assert response.recommendations == []

    @pytest.mark.asyncio
    async def test_unknown_candidate(self, service: JobSearchService) -> None:
        """Personalizing for a missing candidate raises NotFoundError."""
        with pytest.raises(NotFoundError):
            await service.search(candidate_id=404)

    @pytest.mark.asyncio
    async def test_facets_memoized(self, store: InMemoryJobStore, settings: Settings) -> None:
        """Facets are reused within the freshness window."""
        cache = MemoryCache()
        service = JobSearchService(store, settings, cache=cache)

        first = await service.search({"query": "developer"})
        store.jobs[50] = make_job(id=50, title="Developer Advocate", location="Paris")
        second = await service.search({"query": "developer"})

        assert len(cache.data) == 1
        key = next(iter(cache.data))
        assert key.startswith("facets:")
        assert cache.ttls[key] == settings.facet_cache_ttl_seconds
        assert second.facets == first.facets
        assert second.total == first.total + 1


@pytest.mark.unit
class TestDiscovery:
    """Test recommend, trending, featured and related-job lookups."""

    @pytest.mark.asyncio
    async def test_recommend_heuristic(self, service: JobSearchService) -> None:
        """The heuristic path drops matches under the score floor."""
        results = await service.recommend(1, limit=10, use_semantic_matcher=False)
        assert [r.job.id for r in results] == [1, 2]

    @pytest.mark.asyncio
    async def test_recommend_semantic_without_providers(self, service: JobSearchService) -> None:
        """The semantic path with no providers still answers."""
        results = await service.recommend(1, limit=1)
        assert [r.job.id for r in results] == [1]
        assert results[0].source == "heuristic"

    @pytest.mark.asyncio
    async def test_recommend_rejects_bad_limit(self, service: JobSearchService) -> None:
        """A zero limit is a validation error."""
        with pytest.raises(ValidationError):
            await service.recommend(1, limit=0)

    @pytest.mark.asyncio
    async def test_trending(self, settings: Settings) -> None:
        """Popular recent postings come first."""
        jobs = [
            make_job(id=1, view_count=5, published_at=days_ago(2)),
            make_job(id=2, view_count=50, application_count=5, published_at=days_ago(3)),
            make_job(id=3, view_count=0, published_at=days_ago(1)),
        ]
        result = await JobSearchService(make_store(jobs=jobs), settings).trending(limit=2)
        assert [job.id for job in result] == [2, 1]

    @pytest.mark.asyncio
    async def test_featured(self, settings: Settings) -> None:
        """Only featured postings are returned."""
        jobs = [make_job(id=1, is_featured=True), make_job(id=2)]
        result = await JobSearchService(make_store(jobs=jobs), settings).featured(limit=5)
        assert [job.id for job in result] == [1]

    @pytest.mark.asyncio
    async def test_similar(self, service: JobSearchService) -> None:
        """Job 2 shares category, skills and tier with job 1; job 3 shares nothing."""
        result = await service.similar(1)
        assert [job.id for job in result] == [2]

    @pytest.mark.asyncio
    async def test_similar_finds_older_match(self, settings: Settings) -> None:
        """A matching posting older than many unrelated ones is still found."""
        source = make_job(
            id=1, category_id=4, required_skills=["Rust"], experience_tier="senior",
            work_arrangement="hybrid", published_at=days_ago(20),
        )
        twin = make_job(
            id=2, category_id=4, required_skills=["Rust"], experience_tier="senior",
            work_arrangement="hybrid", published_at=days_ago(25),
        )
        unrelated = [
            make_job(
                id=100 + i, category_id=9, required_skills=["COBOL"], experience_tier="entry",
                work_arrangement="onsite", published_at=days_ago(i / 100),
            )
            for i in range(settings.similar_pool_size + 10)
        ]
        service = JobSearchService(make_store(jobs=[source, twin, *unrelated]), settings)

        result = await service.similar(1)

        assert [job.id for job in result] == [2]

    @pytest.mark.asyncio
    async def test_similar_unknown_job(self, service: JobSearchService) -> None:
        """An unknown source posting raises NotFoundError."""
        with pytest.raises(NotFoundError):
            await service.similar(999)

    @pytest.mark.asyncio
    async def test_by_employer(self, store: InMemoryJobStore, settings: Settings) -> None:
        """Only listed postings from the same employer are returned."""
        store.jobs[6] = make_job(id=6, title="Platform Engineer", employer="Acme Corp")
        result = await JobSearchService(store, settings).by_employer(1)
        assert [job.id for job in result] == [6]

    @pytest.mark.asyncio
    async def test_skill_gaps_fall_back_to_heuristic(self, service: JobSearchService) -> None:
        """Without providers the report is heuristic."""
        report = await service.analyze_skill_gaps(1, [2, 3])
        assert report.source == "heuristic"
        assert {g.skill for g in report.per_job_gaps[3]} >= {"Java", "Kotlin"}


@pytest.mark.unit
class TestSuggestionsAndDetails:
    """Test suggestions and job_details."""

    @pytest.mark.asyncio
    async def test_title_suggestions(self, service: JobSearchService) -> None:
        """Titles containing the query are suggested."""
        assert await service.suggestions("py") == ["Python Developer"]

    @pytest.mark.asyncio
    async def test_employer_and_location_suggestions(self, service: JobSearchService) -> None:
        """Employer and location kinds use their own field."""
        assert await service.suggestions("glo", kind="employer") == ["Globex"]
        assert await service.suggestions("mun", kind="location") == ["Munich, Germany"]

    @pytest.mark.asyncio
    async def test_short_query(self, service: JobSearchService) -> None:
        """Queries under two characters suggest nothing."""
        assert await service.suggestions(" p ") == []

    @pytest.mark.asyncio
    async def test_suggestions_distinct_and_capped(self, settings: Settings) -> None:
        """Values are distinct ignoring case and capped at ten."""
        jobs = [make_job(id=i, title=f"Engineer {i:02d}") for i in range(1, 15)]
        jobs.append(make_job(id=20, title="engineer 01"))
        result = await JobSearchService(make_store(jobs=jobs), settings).suggestions("engineer")
        assert len(result) == 10
        assert len({value.lower() for value in result}) == 10

    @pytest.mark.asyncio
    async def test_unknown_kind(self, service: JobSearchService) -> None:
        """An unknown suggestion kind is a validation error."""
        with pytest.raises(ValidationError):
            await service.suggestions("python", kind="salary")  # type: ignore[arg-type]

    @pytest.mark.asyncio
    async def test_job_details(self, sample_jobs: list[JobPosting], settings: Settings) -> None:
        """Details combine the scored posting with related postings."""
        sample_jobs.append(make_job(id=6, title="Platform Engineer", category_id=8,
                                    required_skills=["Go"], experience_tier="executive",
                                    work_arrangement="onsite"))
        store = make_store(jobs=sample_jobs, applications=[make_application(job_id=1)])

        details = await JobSearchService(store, settings).job_details(1, candidate_id=1)

        assert details.job.job.id == 1
        assert details.job.match_score == 100
        assert details.job.is_applied is True
        assert [job.id for job in details.similar_jobs] == [2]
        assert [job.id for job in details.employer_jobs] == [6]

    @pytest.mark.asyncio
    async def test_job_details_unknown(self, service: JobSearchService) -> None:
        """Unknown postings raise NotFoundError."""
        with pytest.raises(NotFoundError):
            await service.job_details(404)
