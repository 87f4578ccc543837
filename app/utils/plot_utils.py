import altair as alt
import pandas as pd

PLATFORM_COLOR = "#d4a373"
CATEGORY_PALETTE = ["#d4a373", "#faedcd", "#e9edc6", "#ccd5ae"]


def _cycled_palette(n):
    return [CATEGORY_PALETTE[i % len(CATEGORY_PALETTE)] for i in range(n)]


def platform_bar_chart(df: pd.DataFrame):
    return alt.Chart(df).mark_bar(
        color=PLATFORM_COLOR,
        cornerRadiusTopLeft=4,
        cornerRadiusTopRight=4,
    ).encode(
        x=alt.X("name:N", sort=None, title=None),
        y=alt.Y("value:Q", title="Trends", axis=alt.Axis(tickMinStep=1)),
        tooltip=["name", "value"],
    ).properties(height=260)


def category_donut_chart(df: pd.DataFrame):
    names = df["name"].tolist()
    return alt.Chart(df).mark_arc(
        innerRadius=60,
        outerRadius=80,
        padAngle=0.05,
    ).encode(
        theta=alt.Theta("value:Q"),
        color=alt.Color(
            "name:N",
            sort=names,
            scale=alt.Scale(domain=names, range=_cycled_palette(len(names))),
            legend=alt.Legend(title=None, orient="bottom", symbolType="circle"),
        ),
        tooltip=["name", "value"],
    ).properties(height=260)
