# app.py
import datetime
import streamlit as st
import plotly.graph_objects as go

from config import APP_NAME, DEFAULTS, configure_logging
from ui import inject_css, header, helptext, kpi_card
from returns_presets import PRESETS
from market import MarketModel, parameters_from_presets
from drawdown import PensionDrawdown
from tax_models import brackets_to_df
from tax_presets import PRESET_RECORDS
from tax_repository import TaxRuleRepository
from simulation import (
    Investment, InvalidProfile, LifeEvent, MoveTo, Profile, Retire,
    Simulator, results_to_frame, run_monte_carlo,
)
from exporters import export_results, export_summary, export_profile

configure_logging()

# ------------- Page setup -------------
st.set_page_config(page_title=APP_NAME, page_icon="📈", layout="wide")
inject_css()
header(APP_NAME, "Year-by-year net worth under each country's tax rules.")

with st.expander("How this app works (30 seconds)"):
    st.write("""
- Each year we apply investment returns, grow your pension pot and add this year's pension contribution.
- We compute **income tax**, **wealth tax** and **capital-gains tax** using the rules of the country you live in that year.
- Life events can change your income, your expenses, move you to another country, or retire you.
- Once retired, you receive 4% of your pension pot each year as income.
- Surplus after expenses is reinvested across your holdings; deficits come out of your wealth.
    """)

countries = list(PRESET_RECORDS.keys())
this_year = datetime.date.today().year

# ------------- Sidebar (inputs) -------------
st.sidebar.header("Your profile")
birth_year = st.sidebar.number_input("Birth year", 1930, this_year, DEFAULTS["birth_year"])
country = st.sidebar.selectbox("Country today", countries, index=countries.index(DEFAULTS["country"]))
target_year = st.sidebar.number_input("Project until", this_year, this_year + 80, max(this_year, DEFAULTS["target_year"]))

st.sidebar.header("Money today")
initial_wealth = st.sidebar.number_input("Net worth", min_value=0, value=DEFAULTS["initial_wealth"], step=10_000)
initial_pot = st.sidebar.number_input("Pension pot", min_value=0, value=DEFAULTS["initial_pension_pot"], step=5_000)
holdings = {}
for asset_class, amount in DEFAULTS["initial_investments"].items():
    holdings[asset_class] = st.sidebar.number_input(f"{asset_class} holding", min_value=0, value=amount, step=1_000)
income = st.sidebar.number_input("Gross income (per year)", min_value=0, value=DEFAULTS["income"], step=1_000)
expenses = st.sidebar.number_input("Expenses (per year)", min_value=0, value=DEFAULTS["expenses"], step=1_000)

st.sidebar.header("Life events")
move_on = st.sidebar.checkbox("Move abroad", value=True)
move_year = st.sidebar.number_input("Move in year", this_year + 1, this_year + 80, max(this_year + 1, DEFAULTS["move_year"]))
move_to = st.sidebar.selectbox("Move to", countries, index=countries.index(DEFAULTS["move_to"]))
retire_year = st.sidebar.number_input("Retire in year", this_year + 1, this_year + 80, max(this_year + 1, DEFAULTS["retire_year"]))

st.sidebar.header("Simulation")
num_paths = st.sidebar.slider("How many futures to simulate", 20, 1000, DEFAULTS["num_paths"], 20)
seed = st.sidebar.number_input("Random seed (-1 = random)", value=DEFAULTS["seed"])
deplete = st.sidebar.checkbox(
    "Withdrawals reduce the pension pot", value=DEFAULTS["deplete_pension_pot"],
    help="Off: the pot keeps growing and pays 4% a year without shrinking."
)

events = {this_year: LifeEvent(year=this_year, income=income, expenses=expenses)}
if move_on:
    events[move_year] = LifeEvent(year=move_year, event=MoveTo(move_to))
if retire_year in events:
    # one event per year: retiring in the move year keeps the move
    retire_year += 1
events[retire_year] = LifeEvent(year=retire_year, income=0, event=Retire())

profile = Profile(
    birth_year=int(birth_year),
    initial_wealth=float(initial_wealth),
    initial_pension_pot=float(initial_pot),
    initial_investments=[Investment(k, float(v)) for k, v in holdings.items() if v > 0],
    initial_country=country,
    target_year=int(target_year),
    life_events=[events[y] for y in sorted(events)],
    start_year=this_year,
)

repository = TaxRuleRepository.from_presets()
parameters = parameters_from_presets(PRESETS)
drawdown = PensionDrawdown(withdrawal_rate=DEFAULTS["withdrawal_rate"], deplete_pot=deplete)

# ------------- One path -------------
st.markdown("### 1) One possible future")
helptext("A single draw of market returns and inflation. All values are nominal.")
try:
    results = Simulator(repository, MarketModel(parameters, seed=None if seed == -1 else int(seed)), drawdown).run(profile)
except InvalidProfile as e:
    st.error(str(e))
    st.stop()

df = results_to_frame(results)
if df.empty:
    st.warning("No year could be simulated. Check the tax rules for your countries.")
    st.stop()

last = df.iloc[-1]
c1, c2, c3 = st.columns(3)
kpi_card(c1, f"Wealth in {int(last['year'])}", f"€{last['remaining_wealth']:,.0f}")
kpi_card(c2, "Total tax paid", f"€{df['total_tax'].sum():,.0f}")
kpi_card(c3, f"Pension pot in {int(last['year'])}", f"€{last['pension_pot']:,.0f}")

st.dataframe(df, use_container_width=True, hide_index=True)

# ------------- Many paths -------------
st.markdown("### 2) Many possible futures")
with st.spinner("Simulating futures…"):
    summary, _ = run_monte_carlo(profile, repository, parameters, num_paths=num_paths,
                                 seed=None if seed == -1 else int(seed), drawdown=drawdown)

figW = go.Figure()
figW.add_trace(go.Scatter(x=summary.index, y=summary["wealth_p50"], mode="lines", name="Median wealth"))
figW.add_trace(go.Scatter(x=summary.index, y=summary["wealth_p95"], mode="lines", name="Wealth p95", line=dict(dash="dot")))
figW.add_trace(go.Scatter(x=summary.index, y=summary["wealth_p5"],  mode="lines", name="Wealth p5",  line=dict(dash="dot"), fill="tonexty"))
if move_on:
    figW.add_vline(x=move_year, line_dash="dash", line_color="orange")
figW.add_vline(x=retire_year, line_dash="dash", line_color="green")
figW.update_layout(
    title="Net worth (nominal)", xaxis_title="Year", yaxis_title="€",
    hovermode="x unified", margin=dict(l=30,r=20,t=60,b=30)
)
st.plotly_chart(figW, use_container_width=True)

figT = go.Figure()
figT.add_trace(go.Bar(x=df["year"], y=df["income_tax"], name="Income taxes"))
figT.add_trace(go.Bar(x=df["year"], y=df["wealth_tax"], name="Wealth tax"))
figT.add_trace(go.Bar(x=df["year"], y=df["capital_gains_tax"], name="Capital gains tax"))
figT.update_layout(barmode="stack", title="Taxes by year (one path)", xaxis_title="Year", yaxis_title="€")
st.plotly_chart(figT, use_container_width=True)

# ------------- Rules -------------
with st.expander("Income tax brackets used"):
    for name in sorted({country, move_to} if move_on else {country}):
        rules = repository.lookup(name)
        if rules is None:
            continue
        st.markdown(f"**{name}**")
        for comp in rules.income_taxes:
            st.caption(comp.name)
            st.dataframe(brackets_to_df(comp), hide_index=True)

# ------------- Export -------------
st.markdown("### 3) Export")
name_csv, data_csv = export_results(results)
st.download_button("⬇️ Download year-by-year results (CSV)", data_csv, file_name=name_csv, mime="text/csv")
name_sum, data_sum = export_summary(summary)
st.download_button("⬇️ Download percentile summary (CSV)", data_sum, file_name=name_sum, mime="text/csv")
name_prof, data_prof = export_profile(profile)
st.download_button("⬇️ Download your profile (JSON)", data_prof, file_name=name_prof, mime="application/json")

st.markdown("---")
st.caption("This app uses simplified tax systems and long-run return estimates. It’s a planning tool, not personal advice.")
