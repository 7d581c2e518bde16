# ! 펌프 루프 운전점 모델 — 유량 샘플 격자 생성 및 곡선 합성
# * 샘플 격자(FlowSample) → 시스템 부하 / 펌프 양정 곡선 쌍(CurvePair)

import math
from dataclasses import dataclass

import numpy as np
import pandas as pd

from constants import (
    DEFAULT_NUM_SAMPLES, MIN_NUM_SAMPLES, MAX_NUM_SAMPLES,
    DEFAULT_VDOT_MIN, DEFAULT_VDOT_MAX,
)
from hydraulics import (
    ValidationError, ParameterSet, system_load_head, pump_head,
)


class InvalidRangeError(ValidationError):
    """샘플 격자 범위/개수 오류"""
    pass


# ──────────────────────────────────────────────
# ? 유량 샘플 격자 (FlowSample)
# ──────────────────────────────────────────────

def generate_samples(
    n: int = DEFAULT_NUM_SAMPLES,
    vdot_min: float = DEFAULT_VDOT_MIN,
    vdot_max: float = DEFAULT_VDOT_MAX,
) -> np.ndarray:
    """
    ! 등간격 유량 샘플 생성

    sample[i] = min + i × (max - min) / (n - 1),  i = 0 … n-1

    * 첫 값 = vdot_min, 마지막 값 = vdot_max (정확히)
    * 반환 배열은 읽기 전용
    """
    if isinstance(n, bool) or not isinstance(n, (int, np.integer)):
        raise InvalidRangeError(f"샘플 수는 정수여야 합니다. (입력값: {n!r})")
    if n < MIN_NUM_SAMPLES:
        raise InvalidRangeError(
            f"샘플 수는 {MIN_NUM_SAMPLES} 이상이어야 합니다. (입력값: {n})"
        )
    if n > MAX_NUM_SAMPLES:
        raise InvalidRangeError(
            f"샘플 수가 최대 허용치({MAX_NUM_SAMPLES})를 초과합니다. (입력값: {n})"
        )
    if not (math.isfinite(vdot_min) and math.isfinite(vdot_max)):
        raise InvalidRangeError(
            f"유량 범위는 유한한 값이어야 합니다. (입력값: [{vdot_min}, {vdot_max}])"
        )
    if vdot_max <= vdot_min:
        raise InvalidRangeError(
            f"최대 유량은 최소 유량보다 커야 합니다. (입력값: [{vdot_min}, {vdot_max}])"
        )

    span = vdot_max - vdot_min
    if not math.isfinite(span):
        raise InvalidRangeError(
            f"유량 범위의 폭이 너무 큽니다. (입력값: [{vdot_min}, {vdot_max}])"
        )

    step = span / (n - 1)
    samples = vdot_min + np.arange(n, dtype=float) * step
    samples[-1] = vdot_max
    samples.flags.writeable = False
    return samples


# ──────────────────────────────────────────────
# ? 곡선 쌍 (CurvePair)
# ──────────────────────────────────────────────

@dataclass(frozen=True, eq=False)
class CurvePair:
    """샘플 격자와 인덱스가 정렬된 시스템 부하 / 펌프 양정 배열"""
    system_load: np.ndarray     # SL (ft·lbf/lbm)
    pump_head: np.ndarray       # Hp (ft·lbf/lbm), V̇ > V̇max 샘플은 NaN

    def __len__(self) -> int:
        return len(self.system_load)

    def valid_mask(self) -> np.ndarray:
        """두 곡선 모두 정의된 샘플 위치"""
        return np.isfinite(self.system_load) & np.isfinite(self.pump_head)


def compute_curves(
    samples,
    params: ParameterSet,
    HpMax: float,
    VdotMax: float,
) -> CurvePair:
    """
    ! 샘플 격자 전체에 SL, Hp 곡선 적용

    * 원소별 계산 → 입력 샘플과 같은 길이, 같은 인덱스 순서
    * 순수 함수: 같은 입력이면 같은 출력
    """
    params.validate()
    flows = np.asarray(samples, dtype=float)
    if flows.ndim != 1:
        raise InvalidRangeError(f"샘플은 1차원 배열이어야 합니다. (입력: {flows.ndim}차원)")

    sl = np.atleast_1d(system_load_head(flows, params))
    hp = np.atleast_1d(pump_head(flows, HpMax, VdotMax))
    sl.flags.writeable = False
    hp.flags.writeable = False
    return CurvePair(system_load=sl, pump_head=hp)


def curves_to_frame(samples, curves: CurvePair) -> pd.DataFrame:
    """곡선 쌍 → 표 형식 (표시 계층용: Vdot, SL, Hp 열)"""
    flows = np.asarray(samples, dtype=float)
    if len(flows) != len(curves):
        raise InvalidRangeError(
            f"샘플과 곡선의 길이가 다릅니다. (샘플: {len(flows)}, 곡선: {len(curves)})"
        )
    return pd.DataFrame({
        "Vdot": flows,
        "SL": curves.system_load,
        "Hp": curves.pump_head,
    })
