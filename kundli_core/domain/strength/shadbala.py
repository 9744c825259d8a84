import math
from datetime import date, timedelta
from typing import Dict

from kundli_core.domain.kundali.birth import BirthDetails
from kundli_core.domain.kundali.dignity import (
    EXALTATION_POINT,
    MOOLATRIKONA,
    is_own_sign,
    relationship,
)
from kundli_core.domain.kundali.divisional.schemas import DivisionalCharts
from kundli_core.domain.kundali.schemas import NatalChart, PlanetPosition
from kundli_core.domain.kundali.zodiac import (
    CLASSICAL_PLANETS,
    KENDRA_HOUSES,
    SIGN_LORDS,
    angular_distance,
    house_distance,
    is_odd_sign,
    normalize,
)
from kundli_core.domain.panchang.hora import WEEKDAY_LORDS, hora_lord, weekday_index
from kundli_core.domain.panchang.sun import SunTimes
from kundli_core.domain.strength.schemas import ShadbalaData, ShadbalaScore


OBLIQUITY = 23.44

NAISARGIKA_BALA = {
    "Sun": 60.0, "Moon": 51.43, "Venus": 42.86, "Jupiter": 34.29,
    "Mercury": 25.71, "Mars": 17.14, "Saturn": 8.57,
}

REQUIRED_VIRUPAS = {
    "Sun": 390.0, "Moon": 360.0, "Mars": 300.0, "Mercury": 420.0,
    "Jupiter": 390.0, "Venus": 330.0, "Saturn": 300.0,
}

# Mean daily motion used to grade speed for Chesta Bala
MEAN_DAILY_MOTION = {
    "Mars": 0.524, "Mercury": 0.9856, "Jupiter": 0.083,
    "Venus": 1.2, "Saturn": 0.033,
}

# Offset from the ascendant of each planet's point of directional strength
DIG_BALA_OFFSET = {
    "Jupiter": 0.0, "Mercury": 0.0,
    "Moon": 90.0, "Venus": 90.0,
    "Saturn": 180.0,
    "Sun": 270.0, "Mars": 270.0,
}

SAPTAVARGA = ["D1", "D2", "D3", "D7", "D9", "D12", "D30"]

SHADBALA_BENEFICS = {"Jupiter", "Venus", "Mercury", "Moon"}
NOCTURNAL_PLANETS = {"Moon", "Mars", "Saturn"}
FEMALE_PLANETS = {"Moon", "Venus"}
MALE_PLANETS = {"Sun", "Mars", "Jupiter"}

DAY_TRIBHAGA = ["Mercury", "Sun", "Saturn"]
NIGHT_TRIBHAGA = ["Moon", "Venus", "Mars"]

SPECIAL_DRISHTI = {"Mars": {4, 8}, "Jupiter": {5, 9}, "Saturn": {3, 10}}
PARTIAL_DRISHTI = {3: 15.0, 10: 15.0, 4: 45.0, 8: 45.0, 5: 30.0, 9: 30.0}


def strength_level(ratio: float) -> str:
    if ratio >= 1.5:
        return "very strong"
    if ratio >= 1.2:
        return "strong"
    if ratio >= 0.8:
        return "moderate"
    if ratio >= 0.5:
        return "weak"
    return "very weak"


def _clamp(value: float, low: float = 0.0, high: float = 60.0) -> float:
    return max(low, min(high, value))


class ShadbalaCalculator:
    """
    Six-fold planetary strength after Brihat Parashara Hora Shastra.

    This class:
    - Scores Sthana, Dig, Kala, Chesta, Naisargika and Drik Bala in virupas
    - Compares the total with the classical minimum per planet
    - Covers the seven classical planets only
    """

    def calculate(
        self,
        chart: NatalChart,
        birth: BirthDetails,
        vargas: DivisionalCharts,
        sun_times: SunTimes,
    ) -> ShadbalaData:
        temporal = self._temporal_lords(birth, sun_times)
        scores: Dict[str, ShadbalaScore] = {}

        for name in CLASSICAL_PLANETS:
            planet = chart.planet(name)
            components: Dict[str, float] = {}

            sthana = self._sthana(planet, vargas, components)
            dig = self._dig(planet, chart.ascendant.longitude)
            kala = self._kala(planet, chart, birth, sun_times, temporal, components)
            chesta = self._chesta(planet, components)
            naisargika = NAISARGIKA_BALA[name]
            drik = self._drik(planet, chart)

            total = sthana + dig + kala + chesta + naisargika + drik
            required = REQUIRED_VIRUPAS[name]
            ratio = total / required

            scores[name] = ShadbalaScore(
                planet=name,
                sthana=round(sthana, 2),
                dig=round(dig, 2),
                kala=round(kala, 2),
                chesta=round(chesta, 2),
                naisargika=naisargika,
                drik=round(drik, 2),
                total_virupas=round(total, 2),
                total_rupas=round(total / 60.0, 2),
                required_virupas=required,
                ratio=round(ratio, 3),
                level=strength_level(ratio),
                components={k: round(v, 2) for k, v in components.items()},
            )

        return ShadbalaData(scores=scores)

    # ─────────────────────────────────────────────
    # Sthana Bala
    # ─────────────────────────────────────────────

    def _sthana(
        self,
        planet: PlanetPosition,
        vargas: DivisionalCharts,
        components: Dict[str, float],
    ) -> float:
        name = planet.name

        uchcha = (180.0 - angular_distance(planet.longitude, EXALTATION_POINT[name])) / 3.0

        saptavargaja = 0.0
        for chart_type in SAPTAVARGA:
            varga = vargas.charts.get(chart_type)
            if varga is None:
                continue
            saptavargaja += self._varga_dignity(
                name,
                varga.sign_of(name),
                planet.degree if chart_type == "D1" else None,
            )

        ojhayugma = 0.0
        for chart_type in ("D1", "D9"):
            varga = vargas.charts.get(chart_type)
            if varga is None:
                continue
            odd = is_odd_sign(varga.sign_of(name))
            if odd != (name in FEMALE_PLANETS):
                ojhayugma += 15.0

        if planet.house in KENDRA_HOUSES:
            kendradi = 60.0
        elif planet.house in (2, 5, 8, 11):
            kendradi = 30.0
        else:
            kendradi = 15.0

        decanate = min(int(planet.degree // 10.0), 2)
        if name in MALE_PLANETS:
            drekkana = 15.0 if decanate == 0 else 0.0
        elif name in FEMALE_PLANETS:
            drekkana = 15.0 if decanate == 2 else 0.0
        else:
            drekkana = 15.0 if decanate == 1 else 0.0

        components.update({
            "uchcha": uchcha,
            "saptavargaja": saptavargaja,
            "ojhayugma": ojhayugma,
            "kendradi": kendradi,
            "drekkana": drekkana,
        })
        return uchcha + saptavargaja + ojhayugma + kendradi + drekkana

    def _varga_dignity(self, name: str, sign: int, degree) -> float:
        mt = MOOLATRIKONA.get(name)
        if degree is not None and mt and mt[0] == sign and mt[1] <= degree < mt[2]:
            return 45.0
        if is_own_sign(name, sign):
            return 30.0

        relation = relationship(name, SIGN_LORDS[sign])
        return {"friend": 15.0, "neutral": 7.5}.get(relation, 3.75)

    # ─────────────────────────────────────────────
    # Dig Bala
    # ─────────────────────────────────────────────

    def _dig(self, planet: PlanetPosition, ascendant: float) -> float:
        strong_point = normalize(ascendant + DIG_BALA_OFFSET[planet.name])
        return (180.0 - angular_distance(planet.longitude, strong_point)) / 3.0

    # ─────────────────────────────────────────────
    # Kala Bala
    # ─────────────────────────────────────────────

    def _temporal_lords(self, birth: BirthDetails, sun_times: SunTimes) -> Dict[str, object]:
        """
        Year, month, weekday and hora lords, plus day/night, at birth.

        The Vedic day runs sunrise to sunrise. Year and month lords are the
        weekday lords of the first civil day of the birth year and month.
        """
        instant = birth.local_datetime
        night_length = timedelta(days=1) - sun_times.daylight

        if instant < sun_times.sunrise:
            vedic_day = birth.birth_date - timedelta(days=1)
            is_day = False
            night_start = sun_times.sunrise - night_length
        else:
            vedic_day = birth.birth_date
            is_day = instant < sun_times.sunset
            night_start = sun_times.sunset

        vara_lord = WEEKDAY_LORDS[weekday_index(vedic_day)]

        if is_day:
            part_length = sun_times.daylight / 12
            elapsed = instant - sun_times.sunrise
            hora_number = min(int(elapsed / part_length), 11) + 1
            tribhaga = DAY_TRIBHAGA[min(int(elapsed / (sun_times.daylight / 3)), 2)]
        else:
            part_length = night_length / 12
            elapsed = instant - night_start
            hora_number = 12 + min(int(elapsed / part_length), 11) + 1
            tribhaga = NIGHT_TRIBHAGA[min(int(elapsed / (night_length / 3)), 2)]

        return {
            "abda": WEEKDAY_LORDS[weekday_index(date(birth.birth_date.year, 1, 1))],
            "masa": WEEKDAY_LORDS[weekday_index(birth.birth_date.replace(day=1))],
            "vara": vara_lord,
            "hora": hora_lord(vara_lord, hora_number),
            "tribhaga": tribhaga,
            "is_day": is_day,
        }

    def _kala(
        self,
        planet: PlanetPosition,
        chart: NatalChart,
        birth: BirthDetails,
        sun_times: SunTimes,
        temporal: Dict[str, object],
        components: Dict[str, float],
    ) -> float:
        name = planet.name

        nathonnatha = self._nathonnatha(name, birth)
        paksha = self._paksha(name, chart)
        tribhaga = 60.0 if name == "Jupiter" or temporal["tribhaga"] == name else 0.0

        lords = 0.0
        for key, value in (("abda", 15.0), ("masa", 30.0), ("vara", 45.0), ("hora", 60.0)):
            if temporal[key] == name:
                lords += value

        ayana = self._ayana(planet, chart.ayanamsa_value)
        if name == "Sun":
            # The Sun counts its ayana bala twice
            ayana *= 2.0

        components.update({
            "nathonnatha": nathonnatha,
            "paksha": paksha,
            "tribhaga": tribhaga,
            "varsha_masa_dina_hora": lords,
            "ayana": ayana,
        })
        return nathonnatha + paksha + tribhaga + lords + ayana

    def _nathonnatha(self, name: str, birth: BirthDetails) -> float:
        if name == "Mercury":
            return 60.0

        utc = birth.utc_datetime
        mean_solar = utc + timedelta(hours=birth.longitude / 15.0)
        hours = mean_solar.hour + mean_solar.minute / 60.0 + mean_solar.second / 3600.0
        from_midnight = min(hours, 24.0 - hours)

        if name in NOCTURNAL_PLANETS:
            return 60.0 * (12.0 - from_midnight) / 12.0
        return 60.0 * from_midnight / 12.0

    def _paksha(self, name: str, chart: NatalChart) -> float:
        elongation = angular_distance(
            chart.planet("Moon").longitude,
            chart.planet("Sun").longitude,
        )
        if name in SHADBALA_BENEFICS:
            return elongation / 3.0
        return 60.0 - elongation / 3.0

    def _ayana(self, planet: PlanetPosition, ayanamsa_value: float) -> float:
        tropical = normalize(planet.longitude + ayanamsa_value)
        declination = math.degrees(
            math.asin(math.sin(math.radians(OBLIQUITY)) * math.sin(math.radians(tropical)))
        )

        if planet.name == "Mercury":
            value = (24.0 + abs(declination)) / 48.0 * 60.0
        elif planet.name in ("Moon", "Saturn"):
            value = (24.0 - declination) / 48.0 * 60.0
        else:
            value = (24.0 + declination) / 48.0 * 60.0
        return _clamp(value)

    # ─────────────────────────────────────────────
    # Chesta Bala
    # ─────────────────────────────────────────────

    def _chesta(self, planet: PlanetPosition, components: Dict[str, float]) -> float:
        if planet.name == "Sun":
            return components["ayana"] / 2.0
        if planet.name == "Moon":
            return components["paksha"]
        if planet.retrograde:
            return 60.0

        ratio = abs(planet.speed) / MEAN_DAILY_MOTION[planet.name]
        if ratio < 0.75:
            return 15.0
        if ratio <= 1.25:
            return 30.0
        return 45.0

    # ─────────────────────────────────────────────
    # Drik Bala
    # ─────────────────────────────────────────────

    def _drik(self, planet: PlanetPosition, chart: NatalChart) -> float:
        total = 0.0
        for other in CLASSICAL_PLANETS:
            if other == planet.name:
                continue
            distance = house_distance(chart.planet(other).sign_index, planet.sign_index)
            value = self._drishti_value(other, distance)
            total += value if other in SHADBALA_BENEFICS else -value
        return total / 4.0

    def _drishti_value(self, aspecting: str, distance: int) -> float:
        if distance == 7 or distance in SPECIAL_DRISHTI.get(aspecting, set()):
            return 60.0
        return PARTIAL_DRISHTI.get(distance, 0.0)
