# ! 펌프 루프 운전점 모델 — 1차원 구간 선형 보간
# * 샘플링된 곡선(SL, Hp)을 임의 유량에서 평가
# * 구간 밖은 가장자리 구간 기울기로 외삽 (클램핑 없음)

import numpy as np

from hydraulics import ValidationError


class InvalidInputError(ValidationError):
    """보간 배열 형식 오류 (길이 불일치, 점 부족, 비단조 x)"""
    pass


class LinearInterpolator:
    """
    ! 구간 선형 보간기, make_interpolator()로 생성

    * 격자점 xs[i]에서는 ys[i]를 정확히 반환
    * [xs[0], xs[-1]] 안쪽은 np.interp, 바깥은 가장자리 기울기 외삽
    """

    def __init__(self, xs, ys):
        xs = np.asarray(xs, dtype=float)
        ys = np.asarray(ys, dtype=float)

        if xs.ndim != 1 or ys.ndim != 1:
            raise InvalidInputError(
                f"xs, ys는 1차원 배열이어야 합니다. (xs: {xs.ndim}차원, ys: {ys.ndim}차원)"
            )
        if len(xs) != len(ys):
            raise InvalidInputError(
                f"xs와 ys의 길이가 다릅니다. (xs: {len(xs)}, ys: {len(ys)})"
            )
        if len(xs) < 2:
            raise InvalidInputError(
                f"보간에는 2개 이상의 점이 필요합니다. (입력값: {len(xs)}개)"
            )
        if not np.all(np.isfinite(xs)):
            raise InvalidInputError("xs에 NaN 또는 무한대 값이 포함되어 있습니다.")
        if not np.all(np.diff(xs) > 0):
            raise InvalidInputError("xs는 순증가(strictly increasing)해야 합니다.")

        # * 호출자 배열과 분리된 읽기 전용 사본
        self.xs = xs.copy()
        self.ys = ys.copy()
        self.xs.flags.writeable = False
        self.ys.flags.writeable = False

    @property
    def x_min(self) -> float:
        return float(self.xs[0])

    @property
    def x_max(self) -> float:
        return float(self.xs[-1])

    def __call__(self, x):
        x_arr = np.asarray(x, dtype=float)

        # * 구간 안: np.interp (격자점은 이웃 NaN과 무관하게 ys[i] 그대로)
        y = np.interp(x_arr, self.xs, self.ys)

        # * 구간 밖: 양 끝 구간 기울기로 외삽
        below = x_arr < self.xs[0]
        above = x_arr > self.xs[-1]
        if np.any(below) or np.any(above):
            lo_slope = (self.ys[1] - self.ys[0]) / (self.xs[1] - self.xs[0])
            hi_slope = (self.ys[-1] - self.ys[-2]) / (self.xs[-1] - self.xs[-2])
            y = np.where(below, self.ys[0] + (x_arr - self.xs[0]) * lo_slope, y)
            y = np.where(above, self.ys[-1] + (x_arr - self.xs[-1]) * hi_slope, y)

        if np.ndim(y) == 0:
            return float(y)
        return y

    def __repr__(self) -> str:
        return f"LinearInterpolator(n={len(self.xs)}, x=[{self.x_min:g}, {self.x_max:g}])"


def make_interpolator(xs, ys) -> LinearInterpolator:
    """
    ! (xs, ys) 샘플로부터 보간 함수 생성

    xs : 순증가 실수 배열
    ys : 같은 길이의 실수 배열
    반환 : f(x) → y (스칼라 입력 시 float, 배열 입력 시 배열)
    """
    return LinearInterpolator(xs, ys)
