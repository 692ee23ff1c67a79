"""Streamlit front-end for the credit log and monthly report builders."""
from __future__ import annotations

import logging

import pandas as pd
import streamlit as st

from factor_reports import BuildCreditLogUseCase, BuildMonthlyReportUseCase, SourceDocument
from factor_reports.config import SETTINGS
from factor_reports.domain.errors import UnrecognizedReportType
from factor_reports.infrastructure.storage import mapping_store
from factor_reports.presentation import credit_log, monthly_report


logging.basicConfig(level=getattr(logging, SETTINGS.log_level, logging.WARNING))

st.set_page_config(page_title="Factor Reports", layout="wide")
st.title("Factor Reports")


def load_mapping_dataframe() -> pd.DataFrame:
    mapping = mapping_store.load_mapping()
    return pd.DataFrame(
        [{"code": code, "country": country, "delete": False} for code, country in sorted(mapping.items())],
        columns=["code", "country", "delete"],
    )


def merge_view(full_df: pd.DataFrame, view_df_edited: pd.DataFrame) -> pd.DataFrame:
    if not isinstance(view_df_edited, pd.DataFrame):
        return full_df.copy()
    view_df_edited = view_df_edited.copy()
    view_df_edited["code"] = view_df_edited["code"].astype(str).str.strip()
    view_df_edited = view_df_edited[view_df_edited["code"] != ""]
    view_codes = set(view_df_edited["code"].str.upper())
    rest = full_df[~full_df["code"].str.upper().isin(view_codes)].copy()
    return pd.concat([rest, view_df_edited], ignore_index=True)


def frame_to_mapping(frame: pd.DataFrame) -> dict[str, str]:
    return {
        str(row["code"]).upper(): "" if pd.isna(row["country"]) else str(row["country"]).strip()
        for _, row in frame.iterrows()
        if row["code"]
    }


def uploads_to_documents(uploads) -> list[SourceDocument]:
    return [SourceDocument(name=upload.name, content=upload.getvalue()) for upload in uploads]


def render_mapping_editor() -> None:
    st.subheader("Client Country Mapping")
    with st.expander("Manage client code to country mapping", expanded=False):
        mapping_df = load_mapping_dataframe()
        search_text = st.text_input("Search code/country", key="mapping_search")
        if search_text:
            pattern = str(search_text).strip().lower()
            mask = mapping_df.apply(
                lambda row: pattern in str(row.get("code", "")).lower()
                or pattern in str(row.get("country", "")).lower(),
                axis=1,
            )
            view_df = mapping_df[mask].copy()
        else:
            view_df = mapping_df.copy()
        st.caption(f"Total {len(mapping_df)} entries; showing {len(view_df)}")
        edited_df = st.data_editor(
            view_df,
            num_rows="dynamic",
            hide_index=True,
            key="mapping_editor",
            use_container_width=True,
        )

        col_add1, col_add2, col_add3 = st.columns([2, 2, 1])
        with col_add1:
            new_code = st.text_input("New client code", key="new_map_code")
        with col_add2:
            new_country = st.text_input("Country", key="new_map_country")
        with col_add3:
            add_entry = st.button("Add", key="add_mapping_btn")

        col_ops1, col_ops2 = st.columns([1, 1])
        with col_ops1:
            del_selected = st.button("Delete selected", key="delete_selected_btn")
        with col_ops2:
            save_clicked = st.button("Save", key="save_mapping_btn")

        if add_entry:
            code = (new_code or "").strip().upper()
            country = (new_country or "").strip()
            if not code:
                st.warning("Client code cannot be empty")
            else:
                merged = merge_view(mapping_df, edited_df)
                merged = pd.concat(
                    [merged, pd.DataFrame([{"code": code, "country": country, "delete": False}])],
                    ignore_index=True,
                )
                mapping_store.save_mapping(frame_to_mapping(merged))
                st.success(f"Added {code} -> {country}")
                st.rerun()

        if del_selected:
            merged = merge_view(mapping_df, edited_df)
            if "delete" in merged.columns:
                merged = merged[~merged["delete"].fillna(False).astype(bool)]
            mapping_store.save_mapping(frame_to_mapping(merged))
            st.success("Deleted selected entries")
            st.rerun()

        if save_clicked:
            mapping_store.save_mapping(frame_to_mapping(merge_view(mapping_df, edited_df)))
            st.success("Mapping saved")
            st.rerun()


def render_credit_log_tab() -> None:
    uploads = st.file_uploader("Upload XML message files", type=["xml"], accept_multiple_files=True)
    if not uploads:
        st.session_state["credit_log"] = None
        st.info("Upload one or more XML files to build the credit log.")
        return

    use_case = BuildCreditLogUseCase(workers=4)
    use_case.load(uploads_to_documents(uploads))
    currencies = use_case.required_currencies()

    rates: dict[str, str] = {}
    if currencies:
        st.subheader("Exchange Rates")
        st.caption(f"Units of each currency per 1 {SETTINGS.reference_currency}. Leave blank to skip conversion.")
        columns = st.columns(min(len(currencies), 4))
        for index, currency in enumerate(currencies):
            with columns[index % len(columns)]:
                rates[currency] = st.text_input(currency, key=f"rate_{currency}")

    if st.button("Build Credit Log", key="build_credit_log_btn"):
        use_case.provide_rates({currency: value for currency, value in rates.items() if value.strip()})
        with st.spinner("Combining messages..."):
            result = use_case.result(use_case.combine())
        st.session_state["credit_log"] = result

    result = st.session_state.get("credit_log")
    if not result:
        return

    for item in result.skipped:
        label = f"{item.kind} in {item.source}" if item.kind else item.source
        st.warning(f"Skipped {label}: {item.reason}")
    if result.all_documents_failed:
        st.error("None of the uploaded files could be parsed.")
        return

    st.metric("Credit requests", len(result.rows))
    st.dataframe(credit_log.to_dataframe(result.rows), hide_index=True)

    col1, col2, col3, col4 = st.columns(4)
    with col1:
        st.download_button(
            "Download TSV (with header)",
            data=credit_log.render_tsv(result.rows).encode("utf-8"),
            file_name="credit_log.tsv",
            mime="text/tab-separated-values",
        )
    with col2:
        st.download_button(
            "Download TSV (no header)",
            data=credit_log.render_tsv(result.rows, include_header=False).encode("utf-8"),
            file_name="credit_log_rows.tsv",
            mime="text/tab-separated-values",
        )
    with col3:
        st.download_button(
            "Download CSV",
            data=credit_log.render_csv(result.rows),
            file_name="credit_log.csv",
            mime="text/csv",
        )
    with col4:
        st.download_button(
            "Download HTML",
            data=credit_log.render_html(result.rows).encode("utf-8"),
            file_name="credit_log.html",
            mime="text/html",
        )


def render_monthly_tab() -> None:
    col1, col2 = st.columns(2)
    with col1:
        volume_file = st.file_uploader("Upload Volume report", key="volume_upload")
    with col2:
        commission_file = st.file_uploader("Upload Commission report", key="commission_upload")

    render_mapping_editor()

    run_btn = st.button("Process Reports", disabled=not (volume_file and commission_file))
    if run_btn and volume_file and commission_file:
        try:
            report = BuildMonthlyReportUseCase().execute(
                SourceDocument(name=volume_file.name, content=volume_file.getvalue()),
                SourceDocument(name=commission_file.name, content=commission_file.getvalue()),
            )
        except UnrecognizedReportType as exc:
            st.session_state["monthly"] = None
            st.error(str(exc))
        else:
            st.session_state["monthly"] = report

    report = st.session_state.get("monthly")
    if not report:
        return

    tabs = st.tabs(["Volume Link Tables", "Volume Report", "Commission Report"])
    with tabs[0]:
        if report.volume.error:
            st.error(f"Could not generate Volume table: {report.volume.error}")
        for table in report.link_tables:
            st.markdown(f"**{table.heading}**")
            st.dataframe(monthly_report.link_table_to_dataframe(table), hide_index=True)
        st.download_button(
            "Download Volume tables (HTML)",
            data=monthly_report.render_volume_page(report).encode("utf-8"),
            file_name="volume_tables.html",
            mime="text/html",
        )
    with tabs[1]:
        if report.volume.error:
            st.error(report.volume.error)
        else:
            st.dataframe(monthly_report.report_table_to_dataframe(report.volume), hide_index=True)
    with tabs[2]:
        if report.commission.error:
            st.error(report.commission.error)
        else:
            st.dataframe(monthly_report.report_table_to_dataframe(report.commission), hide_index=True)
        st.download_button(
            "Download Commission report (HTML)",
            data=monthly_report.render_commission_page(report).encode("utf-8"),
            file_name="commission_report.html",
            mime="text/html",
        )

    st.download_button(
        "Download Excel workbook",
        data=monthly_report.build_workbook(report),
        file_name="monthly_report.xlsx",
        mime="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
    )


if "credit_log" not in st.session_state:
    st.session_state["credit_log"] = None
if "monthly" not in st.session_state:
    st.session_state["monthly"] = None

credit_tab, monthly_tab = st.tabs(["Credit Log", "Monthly Report"])
with credit_tab:
    render_credit_log_tab()
with monthly_tab:
    render_monthly_tab()
