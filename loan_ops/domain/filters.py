"""Compile a multi-facet FilterSpec into a single application predicate"""

import logging
from typing import Callable, Iterable, List
from loan_ops.domain.models import Application, Category, DirectoryContext, FilterSpec
from loan_ops.domain.exceptions import InvalidAmountError, InvalidCategoryError, InvalidRangeError
from loan_ops.domain.status import classify
from loan_ops.utils.date_utils import as_date

Predicate = Callable[[Application], bool]


def _never(app: Application) -> bool:
    return False


def application_amount(app: Application) -> int:
    """
    Principal of an application, missing treated as 0.

    Raises:
        InvalidAmountError: Negative amount
    """
    amount = app.amount or 0
    if amount < 0:
        raise InvalidAmountError(f"Application {app.id} has a negative amount: {amount}")
    return amount


def parse_category(status) -> Category:
    """
    Category from a Category or a case-insensitive name ("finished").

    Raises:
        InvalidCategoryError: Name matches no category
    """
    if isinstance(status, Category):
        return status
    try:
        return Category(str(status).strip().upper())
    except ValueError:
        raise InvalidCategoryError(f"Unknown status category: {status}") from None


def validate_filter(spec: FilterSpec) -> None:
    """
    Reject contract violations before compiling.

    Raises:
        InvalidAmountError: Negative amount bound
        InvalidRangeError: end_date before start_date, or amount_min above amount_max
    """
    for bound in (spec.amount_min, spec.amount_max):
        if bound is not None and bound < 0:
            raise InvalidAmountError(f"Amount bound must not be negative: {bound}")

    if spec.amount_min is not None and spec.amount_max is not None and spec.amount_min > spec.amount_max:
        raise InvalidRangeError(f"amount_min {spec.amount_min} exceeds amount_max {spec.amount_max}")

    if spec.start_date is not None and spec.end_date is not None:
        if as_date(spec.end_date) < as_date(spec.start_date):
            raise InvalidRangeError(f"end_date {spec.end_date} is before start_date {spec.start_date}")


def _search_facet(text: str) -> Predicate:
    needle = text.lower()

    def matches(app: Application) -> bool:
        haystacks = (app.fullname or "", app.phone or "", app.passport or "")
        return any(needle in h.lower() for h in haystacks)

    return matches


def _paid_facet(paid: bool) -> Predicate:
    # Only finished loans carry a meaningful paid flag; everything else passes
    def matches(app: Application) -> bool:
        if classify(app.raw_status) != Category.FINISHED:
            return True
        return app.paid is True if paid else not app.paid

    return matches


def _payment_method_facet(method: str) -> Predicate:
    def matches(app: Application) -> bool:
        return (
            classify(app.raw_status) == Category.FINISHED
            and app.paid is True
            and app.payment_method == method
        )

    return matches


def _region_facet(region: str, context: DirectoryContext) -> Predicate:
    def matches(app: Application) -> bool:
        fillial = context.fillials.get(app.fillial_id)
        return fillial is not None and fillial.region == region

    return matches


def _merchant_facet(merchant_id: int, context: DirectoryContext) -> Predicate:
    def matches(app: Application) -> bool:
        return context.merchant_id_for(app.fillial_id) == merchant_id

    return matches


def _agent_facet(agent_id: int, context: DirectoryContext) -> Predicate:
    agent = context.agents.get(agent_id)
    if agent is None:
        logging.debug("Agent %s not in directory; filter matches nothing", agent_id)
        return _never

    fillial_ids = frozenset(agent.fillial_ids)
    return lambda app: app.fillial_id in fillial_ids


def _amount_facet(amount_min, amount_max) -> Predicate:
    def matches(app: Application) -> bool:
        amount = application_amount(app)
        if amount_min is not None and amount < amount_min:
            return False
        if amount_max is not None and amount > amount_max:
            return False
        return True

    return matches


def _date_facet(start, end) -> Predicate:
    # Compared on calendar dates so the end bound covers the whole last day
    start_day = as_date(start) if start is not None else None
    end_day = as_date(end) if end is not None else None

    def matches(app: Application) -> bool:
        created = app.created_at.date()
        if start_day is not None and created < start_day:
            return False
        if end_day is not None and created > end_day:
            return False
        return True

    return matches


def compile_filter(spec: FilterSpec, context: DirectoryContext) -> Predicate:
    """
    Build one predicate that is the logical AND of every facet present in spec.

    The predicate closes over immutable values only, so it can be evaluated
    independently per application (and across shards) without coordination.

    Hierarchical facets resolve through the injected directory:
    - region / merchant_id: via the application's fillial
    - agent_id: membership of the application's fillial in the agent's set;
      an unknown agent yields a predicate that matches nothing
    """
    validate_filter(spec)

    facets: List[Predicate] = []

    if spec.search and spec.search.strip():
        facets.append(_search_facet(spec.search.strip()))

    if spec.status is not None:
        category = parse_category(spec.status)
        facets.append(lambda app: classify(app.raw_status) == category)

    if spec.paid is not None:
        facets.append(_paid_facet(spec.paid))

    if spec.payment_method is not None:
        facets.append(_payment_method_facet(spec.payment_method))

    if spec.fillial_id is not None:
        fillial_id = spec.fillial_id
        facets.append(lambda app: app.fillial_id == fillial_id)

    if spec.region is not None:
        facets.append(_region_facet(spec.region, context))

    if spec.merchant_id is not None:
        facets.append(_merchant_facet(spec.merchant_id, context))

    if spec.agent_id is not None:
        facets.append(_agent_facet(spec.agent_id, context))

    if spec.expired_month is not None:
        expired_month = spec.expired_month
        facets.append(lambda app: app.term_months == expired_month)

    if spec.amount_min is not None or spec.amount_max is not None:
        facets.append(_amount_facet(spec.amount_min, spec.amount_max))

    if spec.start_date is not None or spec.end_date is not None:
        facets.append(_date_facet(spec.start_date, spec.end_date))

    if _never in facets:
        return _never

    return lambda app: all(facet(app) for facet in facets)


def filter_applications(
    applications: Iterable[Application],
    spec: FilterSpec,
    context: DirectoryContext,
) -> List[Application]:
    """Single pass over the collection, input order preserved"""
    predicate = compile_filter(spec, context)
    return [app for app in applications if predicate(app)]
