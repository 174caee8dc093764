from __future__ import annotations

import io

import streamlit as st

from radius_map.csv_io import CsvSummary, classified_rows, decode_csv_bytes, read_geo_points, write_classified_csv
from radius_map.models import DEFAULT_LATITUDE, DEFAULT_LONGITUDE, DEFAULT_RADIUS_M, GeoPoint
from radius_map.parsing import parse_coordinate
from radius_map.registry import PointRegistry
from radius_map.render import build_deck


def _registry() -> PointRegistry:
    """Per-session registry; Streamlit reruns the script on every interaction."""

    if "registry" not in st.session_state:
        st.session_state["registry"] = PointRegistry()
        st.session_state["reference_committed"] = False
        st.session_state["last_distance_m"] = None
    return st.session_state["registry"]


@st.cache_data(show_spinner=False)
def _parse_upload(data: bytes) -> tuple[list[GeoPoint], CsvSummary]:
    return read_geo_points(io.StringIO(decode_csv_bytes(data)))


def _classified_csv(registry: PointRegistry) -> str:
    buf = io.StringIO()
    write_classified_csv(registry.candidates, registry.reference, buf)
    return buf.getvalue()


def main() -> None:
    st.set_page_config(page_title="半径范围点分类", layout="wide")
    st.title("半径范围点分类：主点 + 半径，判断其他点是否在范围内")

    registry = _registry()

    with st.sidebar:
        st.subheader("主点（参考点）")
        ref_lat = st.number_input(
            "纬度 lat", min_value=-90.0, max_value=90.0, value=DEFAULT_LATITUDE, format="%.6f", key="ref_lat"
        )
        ref_lng = st.number_input(
            "经度 lng", min_value=-180.0, max_value=180.0, value=DEFAULT_LONGITUDE, format="%.6f", key="ref_lng"
        )
        radius_m = st.number_input(
            "半径 radius（米）", min_value=0.0, value=DEFAULT_RADIUS_M, step=100.0, key="radius_m"
        )
        if st.button("更新主点", type="primary", key="update_reference"):
            registry.set_reference_point(float(ref_lat), float(ref_lng), float(radius_m))
            st.session_state["reference_committed"] = True

        st.subheader("添加点")
        new_lat = st.text_input("纬度 lat", value="", key="new_lat")
        new_lng = st.text_input("经度 lng", value="", key="new_lng")
        if st.button("添加点", key="add_point"):
            added = registry.add_candidate_point(parse_coordinate(new_lat), parse_coordinate(new_lng))
            if added is None:
                st.warning("请填写有效的纬度和经度。")
            else:
                st.session_state["last_distance_m"] = added.distance_m

        last = st.session_state.get("last_distance_m")
        if last is not None:
            st.caption(f"上一个点到主点的距离：{last:.2f} m")

        with st.expander("批量导入 / 清空", expanded=False):
            upload = st.file_uploader("CSV（latitude/longitude 或 lat/lng 列）", type=["csv"], key="upload")
            if upload is not None and st.button("导入CSV中的点", key="import_points"):
                try:
                    points, summary = _parse_upload(upload.getvalue())
                except (KeyError, UnicodeDecodeError) as exc:
                    st.error(str(exc))
                else:
                    n = registry.add_candidate_points(points)
                    st.success(f"已导入 {n} 个点（跳过 {summary.rows_skipped} 行）")
            if st.button("清空所有点", key="clear_points"):
                registry.clear()
                st.session_state["last_distance_m"] = None

    reference = registry.reference if st.session_state["reference_committed"] else None
    st.pydeck_chart(build_deck(reference, registry.candidates))

    total = registry.summary()
    c1, c2, c3 = st.columns(3)
    c1.metric("半径内的点", str(registry.inside_count))
    c2.metric("半径外的点", str(total.outside))
    c3.metric("总点数", str(total.total))

    if total.total:
        st.subheader("明细")
        st.dataframe(classified_rows(registry.candidates, registry.reference), height=360)
        st.download_button(
            "下载分类结果 CSV",
            data=_classified_csv(registry),
            file_name="classified.csv",
            mime="text/csv",
            key="download_csv",
        )

    st.caption("说明：距离为球面大圆距离（haversine，地球半径 6371 km）；距离恰好等于半径的点算在半径内。")


if __name__ == "__main__":
    main()
