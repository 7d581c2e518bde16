# ! 펌프 루프 운전점 모델 — 펌프/시스템 곡선 객체, 운전점 계산
# * 타원 펌프 곡선을 포물선 시스템 부하에 대입한 V̇²의 2차식 → 근의 공식
# * 반복 탐색 없이 대수해를 구한 뒤 샘플 곡선 보간값으로 검증

import logging
import math
from dataclasses import dataclass
from typing import Optional, Tuple, Union

import numpy as np

from constants import (
    DEFAULT_HP_MAX, DEFAULT_VDOT_MAX, DEFAULT_VDOT_MIN, DEFAULT_NUM_SAMPLES,
    OPERATING_POINT_TOLERANCE,
    STATUS_FOUND, STATUS_NO_INTERSECTION, STATUS_MISMATCH,
)
from hydraulics import (
    DomainError, ParameterSet,
    system_load_head, pump_head, hydraulic_power_hp,
    flow_independent_head, flow_squared_coefficient,
)
from interpolation import make_interpolator
from curves import CurvePair, generate_samples, compute_curves

logger = logging.getLogger(__name__)


# ──────────────────────────────────────────────
# ? 펌프 P-Q 곡선 클래스
# ──────────────────────────────────────────────

class PumpCurve:
    """
    ! 타원형 펌프 성능 곡선

    * Hp(V̇) = HpMax × √(1 - (V̇/V̇max)²)
    * 시스템 파라미터와 무관 (HpMax, V̇max로만 결정)
    """

    def __init__(self, HpMax: float = DEFAULT_HP_MAX, VdotMax: float = DEFAULT_VDOT_MAX):
        if VdotMax <= 0:
            raise DomainError(f"펌프 최대 유량은 양수여야 합니다. (입력값: {VdotMax} ft³/s)")
        self.HpMax = HpMax
        self.VdotMax = VdotMax

    def head_at_flow(self, Vdot):
        return pump_head(Vdot, self.HpMax, self.VdotMax)

    def get_curve_points(
        self, n_points: int = DEFAULT_NUM_SAMPLES, vdot_min: float = DEFAULT_VDOT_MIN,
    ) -> Tuple[np.ndarray, np.ndarray]:
        Q = generate_samples(n_points, vdot_min, self.VdotMax)
        return Q, np.atleast_1d(self.head_at_flow(Q))


# ──────────────────────────────────────────────
# ? 시스템 부하 곡선 클래스
# ──────────────────────────────────────────────

class SystemCurve:
    """
    ! 베르누이 식 시스템 부하 곡선

    * SL(V̇) = k·V̇² + dpewf  (포물선)
    """

    def __init__(self, params: ParameterSet):
        self.params = params.validate()
        self.k = flow_squared_coefficient(params)
        self.dpewf = flow_independent_head(params)

    def head_at_flow(self, Vdot):
        """주어진 유량에서 시스템이 요구하는 양정 (ft·lbf/lbm)"""
        return system_load_head(Vdot, self.params)

    def get_curve_points(
        self,
        n_points: int = DEFAULT_NUM_SAMPLES,
        vdot_max: float = DEFAULT_VDOT_MAX,
        vdot_min: float = DEFAULT_VDOT_MIN,
    ) -> Tuple[np.ndarray, np.ndarray]:
        Q = generate_samples(n_points, vdot_min, vdot_max)
        return Q, np.atleast_1d(self.head_at_flow(Q))


# ──────────────────────────────────────────────
# ? 운전점 결과 타입
#   Found | NoIntersection | Mismatch
# ──────────────────────────────────────────────

@dataclass(frozen=True)
class OperatingPoint:
    """운전점: 펌프 양정 = 시스템 부하"""
    Vdot: float                 # 유량 (ft³/s)
    Hp: float                   # 양정 (ft·lbf/lbm)
    nu: Optional[float] = None  # 비체적 (ft³/lbm), 동력 계산용

    @property
    def mass_flow_lbm_s(self) -> float:
        if self.nu is None:
            return math.nan
        return self.Vdot / self.nu

    @property
    def power_ft_lbf_s(self) -> float:
        return self.mass_flow_lbm_s * self.Hp

    @property
    def power_hp(self) -> float:
        if self.nu is None:
            return math.nan
        return hydraulic_power_hp(self.Vdot, self.Hp, self.nu)


@dataclass(frozen=True)
class Found:
    point: OperatingPoint
    status = STATUS_FOUND
    found = True


@dataclass(frozen=True)
class NoIntersection:
    """두 곡선이 교차하지 않음 (정상적인 물리 상황)"""
    reason: str
    status = STATUS_NO_INTERSECTION
    found = False


@dataclass(frozen=True)
class Mismatch:
    """
    대수해와 샘플 곡선이 불일치: 모델링 오류 진단

    * 제곱으로 생긴 가짜 근, 또는 격자가 실제 근을 충분히 해상하지 못함
    """
    Vdot: float
    Hp_interp: float
    SL_interp: float
    tolerance: float
    status = STATUS_MISMATCH
    found = False

    @property
    def difference(self) -> float:
        return abs(self.Hp_interp - self.SL_interp)


OperatingPointResult = Union[Found, NoIntersection, Mismatch]


# ──────────────────────────────────────────────
# ? 운전점 탐색 (P-Q ∩ 시스템 곡선)
# ──────────────────────────────────────────────

def solve_flow_squared(a: float, b: float, c: float) -> Optional[float]:
    """
    a·x² + b·x + c = 0 의 양의 근 (x = V̇²)

    * 판별식 < 0 → None
    * a = 0 → 1차식 b·x + c = 0
    """
    if a == 0:
        if b == 0:
            return None
        return -c / b
    disc = b ** 2 - 4.0 * a * c
    if disc < 0:
        return None
    return (-b + math.sqrt(disc)) / (2.0 * a)


def find_operating_point(
    params: ParameterSet,
    HpMax: float,
    VdotMax: float,
    samples,
    curves: CurvePair,
    tolerance: float = OPERATING_POINT_TOLERANCE,
) -> OperatingPointResult:
    """
    ! 펌프 곡선과 시스템 부하 곡선의 교점 (운전점)

    SL = k·V̇² + dpewf,  Hp² = HpMax²·(1 - V̇²/V̇max²)
    SL = Hp 를 제곱하면 V̇²에 대한 2차식:
        a = k²
        b = 2·k·dpewf + HpMax²/V̇max²
        c = dpewf² - HpMax²

    * 해가 없으면 NoIntersection (예외 아님)
    * 샘플 곡선 보간값 |Hp - SL| > tolerance 이면 Mismatch
    """
    params.validate()
    if VdotMax <= 0:
        raise DomainError(f"펌프 최대 유량은 양수여야 합니다. (입력값: {VdotMax} ft³/s)")

    dpewf = flow_independent_head(params)
    k = flow_squared_coefficient(params)

    a = k ** 2
    b = 2.0 * k * dpewf + HpMax ** 2 / VdotMax ** 2
    c = dpewf ** 2 - HpMax ** 2

    Vdot_sq = solve_flow_squared(a, b, c)
    if Vdot_sq is None:
        logger.debug("V̇² 실근 없음 (a=%g, b=%g, c=%g)", a, b, c)
        return NoIntersection("판별식이 음수: 두 곡선이 교차하지 않습니다.")
    if Vdot_sq < 0:
        logger.debug("V̇² 음수 (%g)", Vdot_sq)
        return NoIntersection("V̇² < 0: 양의 유량에서 교차하지 않습니다.")
    if Vdot_sq > VdotMax ** 2:
        logger.debug("V̇²=%g: 펌프 최대 유량 초과", Vdot_sq)
        return NoIntersection("교점이 펌프 최대 유량 밖에 있습니다.")

    Vdot = math.sqrt(Vdot_sq)

    # * 검증: 이미 샘플링된 곡선에서 보간 (닫힌 식 재계산 아님)
    Hp_interp = make_interpolator(samples, curves.pump_head)(Vdot)
    SL_interp = make_interpolator(samples, curves.system_load)(Vdot)

    if not abs(Hp_interp - SL_interp) <= tolerance:
        logger.warning(
            "운전점 불일치: V̇=%.4f, Hp=%.4f, SL=%.4f (허용오차 %g)",
            Vdot, Hp_interp, SL_interp, tolerance,
        )
        return Mismatch(
            Vdot=Vdot, Hp_interp=Hp_interp, SL_interp=SL_interp, tolerance=tolerance,
        )

    return Found(OperatingPoint(Vdot=Vdot, Hp=Hp_interp, nu=params.nu))


def calculate_operating_point(
    params: ParameterSet,
    HpMax: float = DEFAULT_HP_MAX,
    VdotMax: float = DEFAULT_VDOT_MAX,
    n_samples: int = DEFAULT_NUM_SAMPLES,
    vdot_min: float = DEFAULT_VDOT_MIN,
    tolerance: float = OPERATING_POINT_TOLERANCE,
) -> Tuple[np.ndarray, CurvePair, OperatingPointResult]:
    """
    ! 샘플 생성 → 곡선 계산 → 운전점 탐색 일괄 실행

    * 표시 계층은 파라미터 변경마다 이 함수를 호출하고
      (samples, curves, result) 세 가지 산출물을 받습니다.
    """
    samples = generate_samples(n_samples, vdot_min, VdotMax)
    curves = compute_curves(samples, params, HpMax, VdotMax)
    result = find_operating_point(params, HpMax, VdotMax, samples, curves, tolerance)
    return samples, curves, result
