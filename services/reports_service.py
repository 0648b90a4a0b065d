"""
Reports Service - dashboard statistics, alerts, calendar and monthly reports.

Every call re-reads the repositories; nothing is cached between calls. All
date windows take an explicit reference day (`today`) so results are
deterministic; it defaults to the local calendar date.
"""

import calendar
import logging
from datetime import date, datetime, timedelta
from typing import Dict, List

from sqlalchemy.orm import Session

from config import Config
from database.models import QuoteStatus, REALIZED_STATUSES
from services.calendar_repository import CalendarNotesRepository
from services.catalog_repository import ProductsRepository
from services.customers_repository import CustomersRepository
from services.quotes_repository import QuotesRepository

logger = logging.getLogger(__name__)


def _as_date(value) -> date:
    if value is None:
        return date.today()
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return date.fromisoformat(value)


def month_bounds(year: int, month: int):
    """First and last day of a month, as ISO strings."""
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, 1).isoformat(), date(year, month, last_day).isoformat()


def revenue(quotes: List[Dict]) -> float:
    return sum(q['total'] or 0 for q in quotes)


def top_products(quotes: List[Dict], limit: int = 5) -> List[Dict]:
    """
    Quantity sold per item name, highest first. Ties keep the order in
    which names were first seen.
    """
    counts = {}
    for quote in quotes:
        for item in quote['items']:
            counts[item['name']] = counts.get(item['name'], 0) + (item['quantity'] or 0)
    ranked = sorted(counts.items(), key=lambda pair: pair[1], reverse=True)
    return [{'name': name, 'quantity': quantity} for name, quantity in ranked[:limit]]


def status_distribution(quotes: List[Dict]) -> List[Dict]:
    """Count and share of quotes per status. An empty list yields 0% everywhere."""
    total = len(quotes)
    distribution = []
    for status in QuoteStatus:
        count = sum(1 for q in quotes if q['status'] == status.value)
        distribution.append({
            'status': status.value,
            'count': count,
            'percentage': (count / total * 100) if total else 0.0
        })
    return distribution


class ReportsService:
    """Read-only aggregates over the repositories."""

    def __init__(self, session: Session, config=Config):
        self.session = session
        self.config = config
        self.quotes = QuotesRepository(session)
        self.customers = CustomersRepository(session)
        self.products = ProductsRepository(session)
        self.notes = CalendarNotesRepository(session)

    def _realized_between(self, start: date, end: date) -> List[Dict]:
        quotes = self.quotes.list_where('date', between=(start, end))
        return [q for q in quotes if q['status'] in REALIZED_STATUSES]

    def weekly_revenue(self, today=None) -> float:
        today = _as_date(today)
        start = today - timedelta(days=self.config.WEEKLY_WINDOW_DAYS)
        return revenue(self._realized_between(start, today))

    def monthly_revenue(self, today=None) -> float:
        today = _as_date(today)
        return revenue(self._realized_between(today.replace(day=1), today))

    def dashboard_stats(self, today=None) -> Dict:
        """Record counts plus weekly and month-to-date realized revenue."""
        today = _as_date(today)
        stats = {
            'customers_count': self.customers.count(),
            'products_count': self.products.count(),
            'quotes_count': self.quotes.count(),
            'approved_count': self.quotes.count_where('status', equals=QuoteStatus.APPROVED),
            'weekly_revenue': self.weekly_revenue(today),
            'monthly_revenue': self.monthly_revenue(today),
        }
        logger.debug(f"Dashboard stats for {today}: {stats}")
        return stats

    def expiring_quote_alerts(self, today=None) -> List[Dict]:
        """Pending quotes whose validity ends within the alert window."""
        today = _as_date(today)
        start = today.isoformat()
        end = (today + timedelta(days=self.config.ALERT_WINDOW_DAYS)).isoformat()

        alerts = []
        for quote in self.quotes.list_where('status', equals=QuoteStatus.PENDING):
            validity = quote['validity']
            if validity and start <= validity <= end:
                alerts.append({
                    'type': 'quote_expiring',
                    'quote_id': quote['id'],
                    'customer_name': quote['customer_name'],
                    'validity': validity,
                    'expires_in_days': (date.fromisoformat(validity) - today).days,
                    'message': f"Expira: {quote['customer_name']}",
                })
        return sorted(alerts, key=lambda a: (a['validity'], a['quote_id']))

    def calendar_month(self, year: int = None, month: int = None, today=None) -> Dict:
        """
        Quotes due for delivery and notes in a month, grouped by day.
        Defaults to the month containing `today`.
        """
        if year is None or month is None:
            today = _as_date(today)
            year, month = today.year, today.month
        start, end = month_bounds(year, month)

        deliveries = self.quotes.list_where('delivery_date', between=(start, end))
        notes = self.notes.list_between(start, end)

        days = {}
        for quote in deliveries:
            day = days.setdefault(quote['delivery_date'], {'deliveries': [], 'note': None})
            day['deliveries'].append(quote)
        for note in notes:
            day = days.setdefault(note['date'], {'deliveries': [], 'note': None})
            day['note'] = note

        return {
            'year': year,
            'month': month,
            'start': start,
            'end': end,
            'deliveries': deliveries,
            'notes': notes,
            'days': dict(sorted(days.items())),
        }

    def day_detail(self, day) -> Dict:
        """Deliveries and note for one calendar day."""
        day = _as_date(day).isoformat()
        return {
            'date': day,
            'deliveries': self.quotes.list_where('delivery_date', equals=day),
            'note': self.notes.get_for_date(day),
        }

    def monthly_report(self, today=None) -> Dict:
        """
        Performance for the month containing `today`.

        monthly_quotes and monthly_realized count the whole calendar month,
        and conversion_rate is their ratio as a percentage. Revenue and
        average ticket cover realized quotes dated from the first of the
        month up to `today`.
        """
        today = _as_date(today)
        month_start, month_end = month_bounds(today.year, today.month)

        month_quotes = self.quotes.list_where('date', between=(month_start, month_end))
        realized_month = [q for q in month_quotes if q['status'] in REALIZED_STATUSES]
        realized_to_date = [q for q in realized_month if q['date'] <= today.isoformat()]
        monthly_revenue = revenue(realized_to_date)

        all_quotes = sorted(self.quotes.list_all(), key=lambda q: q['id'])
        realized_all = [q for q in all_quotes if q['status'] in REALIZED_STATUSES]

        return {
            'month_start': month_start,
            'month_end': month_end,
            'monthly_quotes': len(month_quotes),
            'monthly_realized': len(realized_month),
            'monthly_revenue': monthly_revenue,
            'weekly_revenue': self.weekly_revenue(today),
            'avg_ticket': monthly_revenue / len(realized_to_date) if realized_to_date else 0,
            'conversion_rate': (len(realized_month) / len(month_quotes) * 100) if month_quotes else 0.0,
            'top_products': top_products(realized_all, self.config.TOP_PRODUCTS_LIMIT),
            'status_distribution': status_distribution(all_quotes),
        }
