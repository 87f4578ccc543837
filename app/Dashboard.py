import sys, os
import streamlit as st

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

from utils.load_data import get_controller, get_settings, request_refresh, run_pending_cycle
from utils.plot_utils import category_donut_chart, platform_bar_chart
from resale_radar.config import APP_TITLE
from resale_radar.dashboard.cards import SKELETON_CARDS, build_card


st.set_page_config(page_title=APP_TITLE, layout='wide')

settings = get_settings()
controller = get_controller()
state = controller.state

# --- Header ---
head_left, head_right = st.columns([4, 1])
with head_left:
    st.title(f'📦 {APP_TITLE}')
    st.caption(f'{settings.country} market analysis · resale dashboard · local prices in {settings.currency}')
with head_right:
    if st.button('🔄 Sync', disabled=state.loading, width='stretch'):
        request_refresh(controller)
        st.rerun()

if state.error:
    st.error(state.error, icon='⚠️')

# --- Hero ---
if state.insight:
    hero, blurb = st.columns([2, 1])
    with hero:
        st.header(state.insight.title or 'Market insight')
        if state.insight.summary:
            st.write(state.insight.summary)
        m1, m2 = st.columns(2)
        m1.metric('Items analysed', len(state.insight.trends))
        m2.metric('Average resale margin', 'High')
    with blurb:
        st.subheader('💲 Profitability analysis')
        st.caption(
            f'Source prices compared with what the informal and online markets '
            f'in {settings.city} are charging.'
        )

# --- Charts ---
left, right = st.columns(2)
with left:
    st.subheader('🌐 Import origin')
    st.altair_chart(platform_bar_chart(controller.platform_counts()), width='stretch')
with right:
    st.subheader('🛍️ Top-selling categories')
    categories = controller.category_counts()
    if categories.empty:
        st.info('No categories yet.')
    else:
        st.altair_chart(category_donut_chart(categories), width='stretch')

# --- Trend feed ---
st.subheader(f'↗️ Resale opportunities in {settings.country}')
st.caption(f'Estimated prices ({settings.currency})')

if state.loading:
    cols = st.columns(4)
    for i in range(SKELETON_CARDS):
        with cols[i % 4]:
            with st.container(border=True):
                st.markdown('&nbsp;\n\n&nbsp;\n\n&nbsp;')
                st.progress(0)
elif state.insight:
    cols = st.columns(4)
    for i, trend in enumerate(state.insight.trends):
        card = build_card(trend)
        with cols[i % 4]:
            with st.container(border=True):
                top, score = st.columns(2)
                top.caption(f'**{card.platform}**')
                score.caption(f'📈 {card.popularity} popularity')
                st.progress(card.progress)
                st.markdown(f'#### {card.name}')
                st.caption(card.description)
                p1, p2 = st.columns(2)
                p1.metric('Import', card.source_price or '-')
                p2.metric('Est. resale', card.resale_price or '-')
                st.markdown(f'Gross profit: :green[**{card.profit or "-"}**]')
                if card.tag:
                    st.caption(card.tag)

# --- Sources ---
if state.show_sources:
    st.subheader('Price and data sources')
    cols = st.columns(3)
    for i, ref in enumerate(state.renderable_sources):
        cols[i % 3].markdown(f'🔗 [{ref.web.title}]({ref.web.uri})')

st.markdown('---')
st.caption(
    f'© {APP_TITLE} · market intelligence. Resale prices are estimates based on '
    f'informal and online market trends in {settings.country}.'
)

# Page is on screen (stale content + skeletons); now settle the pending cycle
if state.loading and run_pending_cycle(controller):
    st.rerun()
