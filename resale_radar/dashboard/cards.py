from dataclasses import dataclass

from resale_radar.schemas import Trend

SKELETON_CARDS = 8


@dataclass(frozen=True)
class TrendCard:
    platform: str
    popularity: str
    progress: float   # 0.0-1.0, clamped for the progress bar only
    name: str
    description: str
    source_price: str
    resale_price: str
    profit: str
    tag: str


def build_card(trend: Trend) -> TrendCard:
    score = trend.popularity_score
    return TrendCard(
        platform=trend.platform.upper(),
        popularity=f"{score}%",
        progress=min(max(score, 0), 100) / 100,
        name=trend.name,
        description=trend.description,
        source_price=trend.estimated_source_price,
        resale_price=trend.estimated_resale_price,
        profit=f"+{trend.estimated_profit}" if trend.estimated_profit else "",
        tag=f"#{trend.tags[0]}" if trend.tags else "",
    )
