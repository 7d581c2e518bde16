# ! 펌프 루프 운전점 모델 — 파라미터 갱신, 스윕, 민감도 분석
# * 슬라이더 하나를 움직이는 상황을 파라미터 값 배열로 재현

import dataclasses
import logging
import math
from typing import Iterable, Optional

import numpy as np
import pandas as pd

from constants import (
    PARAMETER_RANGES,
    DEFAULT_HP_MAX, DEFAULT_VDOT_MAX, DEFAULT_VDOT_MIN, DEFAULT_NUM_SAMPLES,
    OPERATING_POINT_TOLERANCE,
)
from hydraulics import ValidationError, DomainError, ParameterSet
from pump import calculate_operating_point

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════
#  파라미터 갱신 (불변 객체 교체)
# ══════════════════════════════════════════════

def update_parameters(
    params: ParameterSet,
    enforce_ranges: bool = False,
    **changes,
) -> ParameterSet:
    """
    ! 변경된 필드만 바꾼 새 ParameterSet 반환 (원본은 그대로)

    * 알 수 없는 파라미터 이름 → ValidationError
    * enforce_ranges=True 이면 PARAMETER_RANGES 밖의 값 → DomainError
    """
    unknown = set(changes) - set(ParameterSet.field_names())
    if unknown:
        raise ValidationError(f"알 수 없는 파라미터: {sorted(unknown)}")

    if enforce_ranges:
        for name, value in changes.items():
            if name not in PARAMETER_RANGES:
                continue
            lo, hi = PARAMETER_RANGES[name]
            if not lo <= value <= hi:
                raise DomainError(
                    f"{name} 값이 허용 범위 [{lo}, {hi}]를 벗어났습니다. (입력값: {value})"
                )

    return dataclasses.replace(params, **changes)


# ══════════════════════════════════════════════
#  단일 파라미터 스윕
# ══════════════════════════════════════════════

def run_parameter_sweep(
    base: ParameterSet,
    name: str,
    values: Iterable[float],
    HpMax: float = DEFAULT_HP_MAX,
    VdotMax: float = DEFAULT_VDOT_MAX,
    n_samples: int = DEFAULT_NUM_SAMPLES,
    vdot_min: float = DEFAULT_VDOT_MIN,
    tolerance: float = OPERATING_POINT_TOLERANCE,
) -> pd.DataFrame:
    """
    ! 파라미터 하나를 values로 바꿔가며 운전점 재계산

    반환 DataFrame 열:
        value    : 파라미터 값
        status   : found / no_intersection / mismatch
        Vdot     : 운전점 유량 (ft³/s), 없으면 NaN
        Hp       : 운전점 양정 (ft·lbf/lbm), 없으면 NaN
        power_hp : 수동력 (hp), 없으면 NaN
    """
    if name not in ParameterSet.field_names():
        raise ValidationError(f"알 수 없는 파라미터: {name!r}")

    values = [float(v) for v in values]
    logger.info("파라미터 %s 스윕: %d개 값", name, len(values))

    rows = []
    for value in values:
        params = update_parameters(base, **{name: value})
        _, _, result = calculate_operating_point(
            params, HpMax, VdotMax, n_samples, vdot_min, tolerance,
        )
        if result.found:
            op = result.point
            rows.append({
                "value": value, "status": result.status,
                "Vdot": op.Vdot, "Hp": op.Hp, "power_hp": op.power_hp,
            })
        else:
            rows.append({
                "value": value, "status": result.status,
                "Vdot": math.nan, "Hp": math.nan, "power_hp": math.nan,
            })

    return pd.DataFrame(rows, columns=["value", "status", "Vdot", "Hp", "power_hp"])


def sweep_range(name: str, n_points: int = 11) -> np.ndarray:
    """슬라이더 범위 전체를 n_points 등간격으로"""
    if name not in PARAMETER_RANGES:
        raise ValidationError(f"슬라이더 범위가 정의되지 않은 파라미터: {name!r}")
    lo, hi = PARAMETER_RANGES[name]
    return np.linspace(lo, hi, n_points)


# ══════════════════════════════════════════════
#  민감도 분석
# ══════════════════════════════════════════════

def run_sensitivity(
    base: Optional[ParameterSet] = None,
    HpMax: float = DEFAULT_HP_MAX,
    VdotMax: float = DEFAULT_VDOT_MAX,
    n_samples: int = DEFAULT_NUM_SAMPLES,
    vdot_min: float = DEFAULT_VDOT_MIN,
    tolerance: float = OPERATING_POINT_TOLERANCE,
) -> dict:
    """
    ! 슬라이더 파라미터별 운전점 유량 민감도

    * 각 파라미터를 범위 최솟값 / 최댓값으로 단독 변경
    * 다른 파라미터는 base 값 고정

    반환:
        baseline_flow : base 파라미터의 운전점 유량 (없으면 NaN)
        low_flows     : 파라미터별 최솟값에서의 유량
        high_flows    : 파라미터별 최댓값에서의 유량
        deltas        : high - low 유량 차이
        ranking       : |delta| 큰 순서 (NaN은 맨 뒤)
        critical_parameter : 가장 영향이 큰 파라미터 (모두 NaN이면 None)
    """
    if base is None:
        base = ParameterSet.default()

    common = dict(
        HpMax=HpMax, VdotMax=VdotMax, n_samples=n_samples,
        vdot_min=vdot_min, tolerance=tolerance,
    )

    _, _, base_result = calculate_operating_point(
        base, HpMax, VdotMax, n_samples, vdot_min, tolerance,
    )
    baseline_flow = base_result.point.Vdot if base_result.found else math.nan

    low_flows, high_flows, deltas = {}, {}, {}
    for name, (lo, hi) in PARAMETER_RANGES.items():
        df = run_parameter_sweep(base, name, [lo, hi], **common)
        low, high = (float(v) for v in df["Vdot"])
        low_flows[name] = low
        high_flows[name] = high
        deltas[name] = high - low

    # NaN (운전점 없음) 항목은 맨 뒤
    ranking = sorted(
        deltas,
        key=lambda p: (math.isnan(deltas[p]), -abs(np.nan_to_num(deltas[p]))),
    )
    critical = ranking[0] if not math.isnan(deltas[ranking[0]]) else None

    return {
        "baseline_flow": baseline_flow,
        "low_flows": low_flows,
        "high_flows": high_flows,
        "deltas": deltas,
        "ranking": ranking,
        "critical_parameter": critical,
    }
