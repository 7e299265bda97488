"""
SGP4 Propagator

SGP4/SDP4 analytic propagation of TLE mean elements to TEME position and
velocity, following the algorithm of Vallado et al. (2006) "Revisiting
Spacetrack Report #3" (AAS 06-675) in its improved ('i') operation mode.

All derived constants are computed once at construction. propagate() only
reads them, so one propagator can serve many threads.

Implementation details:
- WGS-72 gravitational constants by default, WGS-84 available
- Perigee-dependent drag constants (s/q0 adjustment below 156 km and 98 km)
- Simplified drag for perigees below 220 km
- Deep-space branch for periods of 225 minutes or more (see deep_space.py)
- Long-period and short-period periodics, Kepler step limiting at 0.95 rad

References:
- Vallado, D. A., et al. (2006). "Revisiting Spacetrack Report #3." AIAA 2006-6753
- Hoots, F. R., & Roehrich, R. L. (1980). "Spacetrack Report No. 3"
"""

import logging
import math
from typing import Tuple

import numpy as np

from orbit_translator.constants import DEEP_SPACE_PERIOD_MIN, TWOPI, WGS72, XPDOTP, GravityModel
from orbit_translator.deep_space import DeepSpace
from orbit_translator.errors import DecayedOrbit, PropagationError
from orbit_translator.time_system import JulianDate, greenwich_sidereal_time
from orbit_translator.tle_parser import MeanElements

logger = logging.getLogger(__name__)

X2O3 = 2.0 / 3.0
TEMP4 = 1.5e-12  # guard for 1 + cos(i) near 180 deg inclination
MIN_ECCENTRICITY = 1e-6
KEPLER_TOLERANCE = 1e-12
KEPLER_MAX_ITER = 10
KEPLER_MAX_STEP = 0.95

# 1949 December 31 00:00 UT, the SGP4 epoch origin
EPOCH_ORIGIN_JD = 2433281.5


class SGP4Propagator:
    """
    Analytic propagator for one set of TLE mean elements.

    Attributes:
        elements: The mean elements being propagated
        gravity: Gravity model constants
        method: 'n' for near-Earth, 'd' for deep-space
        epoch: Epoch of the elements
    """

    def __init__(self, elements: MeanElements, gravity: GravityModel = WGS72):
        self.elements = elements
        self.gravity = gravity
        self.epoch = elements.epoch

        self.bstar = elements.bstar
        self.ecco = elements.eccentricity
        self.argpo = elements.argument_of_perigee_rad
        self.inclo = elements.inclination_rad
        self.mo = elements.mean_anomaly_rad
        self.nodeo = elements.raan_rad
        self.no_kozai = elements.mean_motion / XPDOTP

        self.method = "n"
        self.isimp = 0
        self.deep_space = None
        self._initialize()

    def _initialize(self):
        """Compute all derived constants (Vallado's initl and sgp4init)."""
        g = self.gravity
        ss = 78.0 / g.radiusearthkm + 1.0
        qzms2t = ((120.0 - 78.0) / g.radiusearthkm) ** 4

        ecco = self.ecco
        inclo = self.inclo
        argpo = self.argpo

        # Un-Kozai the mean motion
        eccsq = ecco * ecco
        omeosq = 1.0 - eccsq
        rteosq = math.sqrt(omeosq)
        cosio = math.cos(inclo)
        cosio2 = cosio * cosio

        ak = math.pow(g.xke / self.no_kozai, X2O3)
        d1 = 0.75 * g.j2 * (3.0 * cosio2 - 1.0) / (rteosq * omeosq)
        del_ = d1 / (ak * ak)
        adel = ak * (1.0 - del_ * del_ - del_ * (1.0 / 3.0 + 134.0 * del_ * del_ / 81.0))
        del_ = d1 / (adel * adel)
        self.no_unkozai = self.no_kozai / (1.0 + del_)

        ao = math.pow(g.xke / self.no_unkozai, X2O3)
        sinio = math.sin(inclo)
        po = ao * omeosq
        con42 = 1.0 - 5.0 * cosio2
        self.con41 = -con42 - cosio2 - cosio2
        posq = po * po
        rp = ao * (1.0 - ecco)
        self.ao = ao

        self.gsto = greenwich_sidereal_time(self.epoch)

        # Use the simplified drag model for perigees below 220 km
        if rp < 220.0 / g.radiusearthkm + 1.0:
            self.isimp = 1

        # Adjust s and q0 for perigees below 156 km
        sfour = ss
        qzms24 = qzms2t
        perige = (rp - 1.0) * g.radiusearthkm
        if perige < 156.0:
            sfour = perige - 78.0
            if perige < 98.0:
                sfour = 20.0
            qzms24 = ((120.0 - sfour) / g.radiusearthkm) ** 4
            sfour = sfour / g.radiusearthkm + 1.0

        pinvsq = 1.0 / posq
        tsi = 1.0 / (ao - sfour)
        self.eta = ao * ecco * tsi
        etasq = self.eta * self.eta
        eeta = ecco * self.eta
        psisq = math.fabs(1.0 - etasq)
        coef = qzms24 * tsi ** 4
        coef1 = coef / psisq ** 3.5
        cc2 = coef1 * self.no_unkozai * (
            ao * (1.0 + 1.5 * etasq + eeta * (4.0 + etasq))
            + 0.375 * g.j2 * tsi / psisq * self.con41 * (8.0 + 3.0 * etasq * (8.0 + etasq))
        )
        self.cc1 = self.bstar * cc2
        cc3 = 0.0
        if ecco > 1.0e-4:
            cc3 = -2.0 * coef * tsi * g.j3oj2 * self.no_unkozai * sinio / ecco
        self.x1mth2 = 1.0 - cosio2
        self.cc4 = 2.0 * self.no_unkozai * coef1 * ao * omeosq * (
            self.eta * (2.0 + 0.5 * etasq)
            + ecco * (0.5 + 2.0 * etasq)
            - g.j2 * tsi / (ao * psisq) * (
                -3.0 * self.con41 * (1.0 - 2.0 * eeta + etasq * (1.5 - 0.5 * eeta))
                + 0.75 * self.x1mth2 * (2.0 * etasq - eeta * (1.0 + etasq)) * math.cos(2.0 * argpo)
            )
        )
        self.cc5 = 2.0 * coef1 * ao * omeosq * (1.0 + 2.75 * (etasq + eeta) + eeta * etasq)

        # Secular rates from J2 and J4
        cosio4 = cosio2 * cosio2
        temp1 = 1.5 * g.j2 * pinvsq * self.no_unkozai
        temp2 = 0.5 * temp1 * g.j2 * pinvsq
        temp3 = -0.46875 * g.j4 * pinvsq * pinvsq * self.no_unkozai
        self.mdot = (
            self.no_unkozai
            + 0.5 * temp1 * rteosq * self.con41
            + 0.0625 * temp2 * rteosq * (13.0 - 78.0 * cosio2 + 137.0 * cosio4)
        )
        self.argpdot = (
            -0.5 * temp1 * con42
            + 0.0625 * temp2 * (7.0 - 114.0 * cosio2 + 395.0 * cosio4)
            + temp3 * (3.0 - 36.0 * cosio2 + 49.0 * cosio4)
        )
        xhdot1 = -temp1 * cosio
        self.nodedot = xhdot1 + (
            0.5 * temp2 * (4.0 - 19.0 * cosio2) + 2.0 * temp3 * (3.0 - 7.0 * cosio2)
        ) * cosio
        xpidot = self.argpdot + self.nodedot
        self.omgcof = self.bstar * cc3 * math.cos(argpo)
        self.xmcof = 0.0
        if ecco > 1.0e-4:
            self.xmcof = -X2O3 * coef * self.bstar / eeta
        self.nodecf = 3.5 * omeosq * xhdot1 * self.cc1
        self.t2cof = 1.5 * self.cc1

        # Long-period coefficients, guarded at 180 deg inclination
        self.xlcof = _long_period_xlcof(g, sinio, cosio)
        self.aycof = -0.5 * g.j3oj2 * sinio
        self.delmo = (1.0 + self.eta * math.cos(self.mo)) ** 3
        self.sinmao = math.sin(self.mo)
        self.x7thm1 = 7.0 * cosio2 - 1.0

        if TWOPI / self.no_unkozai >= DEEP_SPACE_PERIOD_MIN:
            self.method = "d"
            self.isimp = 1
            epoch_days = (self.epoch.day - EPOCH_ORIGIN_JD) + self.epoch.seconds / 86400.0
            self.deep_space = DeepSpace(
                g, epoch_days, ecco, argpo, inclo, self.nodeo, self.mo, self.no_unkozai,
                self.gsto, self.mdot, self.nodedot, self.argpdot, xpidot,
            )

        self.d2 = self.d3 = self.d4 = 0.0
        self.t3cof = self.t4cof = self.t5cof = 0.0
        if self.isimp != 1:
            cc1sq = self.cc1 * self.cc1
            self.d2 = 4.0 * ao * tsi * cc1sq
            temp = self.d2 * tsi * self.cc1 / 3.0
            self.d3 = (17.0 * ao + sfour) * temp
            self.d4 = 0.5 * temp * ao * tsi * (221.0 * ao + 31.0 * sfour) * self.cc1
            self.t3cof = self.d2 + 2.0 * cc1sq
            self.t4cof = 0.25 * (3.0 * self.d3 + self.cc1 * (12.0 * self.d2 + 10.0 * cc1sq))
            self.t5cof = 0.2 * (
                3.0 * self.d4
                + 12.0 * self.cc1 * self.d3
                + 6.0 * self.d2 * self.d2
                + 15.0 * cc1sq * (2.0 * self.d2 + cc1sq)
            )

        logger.debug(
            f"SGP4 init for {self.elements.satellite_number}: method={self.method}, "
            f"isimp={self.isimp}, perigee={perige:.1f} km, "
            f"period={TWOPI / self.no_unkozai:.2f} min"
        )

    def propagate(self, tsince: float) -> Tuple[np.ndarray, np.ndarray]:
        """
        Propagate to a time offset from the element epoch.

        Args:
            tsince: Time since epoch (minutes)

        Returns:
            Tuple of (position km, velocity km/s) in TEME

        Raises:
            PropagationError: For SGP4 error codes 1 through 4
            DecayedOrbit: If the radius falls below one Earth radius
        """
        g = self.gravity
        vkmpersec = g.radiusearthkm * g.xke / 60.0
        t = tsince

        # Secular gravity and atmospheric drag
        xmdf = self.mo + self.mdot * t
        argpdf = self.argpo + self.argpdot * t
        nodedf = self.nodeo + self.nodedot * t
        argpm = argpdf
        mm = xmdf
        t2 = t * t
        nodem = nodedf + self.nodecf * t2
        tempa = 1.0 - self.cc1 * t
        tempe = self.bstar * self.cc4 * t
        templ = self.t2cof * t2

        if self.isimp != 1:
            delomg = self.omgcof * t
            delmtemp = 1.0 + self.eta * math.cos(xmdf)
            delm = self.xmcof * (delmtemp * delmtemp * delmtemp - self.delmo)
            temp = delomg + delm
            mm = xmdf + temp
            argpm = argpdf - temp
            t3 = t2 * t
            t4 = t3 * t
            tempa = tempa - self.d2 * t2 - self.d3 * t3 - self.d4 * t4
            tempe = tempe + self.bstar * self.cc5 * (math.sin(mm) - self.sinmao)
            templ = templ + self.t3cof * t3 + t4 * (self.t4cof + t * self.t5cof)

        nm = self.no_unkozai
        em = self.ecco
        inclm = self.inclo
        if self.method == "d":
            em, argpm, inclm, mm, nodem, nm = self.deep_space.secular(
                t, em, argpm, inclm, mm, nodem
            )

        if nm <= 0.0:
            raise PropagationError(2, t, f"mean motion {nm:.6g} rad/min is not positive")

        am = math.pow(g.xke / nm, X2O3) * tempa * tempa
        nm = g.xke / math.pow(am, 1.5)
        em = em - tempe

        if em >= 1.0 or em < -0.001:
            raise PropagationError(1, t, f"mean eccentricity {em:.6g} is outside [0, 1)")
        if em < MIN_ECCENTRICITY:
            em = MIN_ECCENTRICITY

        mm = mm + self.no_unkozai * templ
        xlm = mm + argpm + nodem
        nodem = math.fmod(nodem, TWOPI)
        argpm = math.fmod(argpm, TWOPI)
        xlm = math.fmod(xlm, TWOPI)
        mm = math.fmod(xlm - argpm - nodem, TWOPI)

        sinim = math.sin(inclm)
        cosim = math.cos(inclm)

        # Lunar-solar periodics
        ep = em
        xincp = inclm
        argpp = argpm
        nodep = nodem
        mp = mm
        sinip = sinim
        cosip = cosim
        xlcof = self.xlcof
        aycof = self.aycof
        con41 = self.con41
        x1mth2 = self.x1mth2
        x7thm1 = self.x7thm1

        if self.method == "d":
            ep, xincp, nodep, argpp, mp = self.deep_space.periodics(
                t, ep, xincp, nodep, argpp, mp
            )
            if xincp < 0.0:
                xincp = -xincp
                nodep = nodep + math.pi
                argpp = argpp - math.pi
            if ep < 0.0 or ep > 1.0:
                raise PropagationError(3, t, f"perturbed eccentricity {ep:.6g} is outside [0, 1]")

            sinip = math.sin(xincp)
            cosip = math.cos(xincp)
            aycof = -0.5 * g.j3oj2 * sinip
            xlcof = _long_period_xlcof(g, sinip, cosip)

        # Long-period periodics
        axnl = ep * math.cos(argpp)
        temp = 1.0 / (am * (1.0 - ep * ep))
        aynl = ep * math.sin(argpp) + temp * aycof
        xl = mp + argpp + nodep + temp * xlcof * axnl

        # Kepler's equation in equinoctial form
        u = math.fmod(xl - nodep, TWOPI)
        eo1 = u
        tem5 = 9999.9
        ktr = 1
        sineo1 = coseo1 = 0.0
        while math.fabs(tem5) >= KEPLER_TOLERANCE and ktr <= KEPLER_MAX_ITER:
            sineo1 = math.sin(eo1)
            coseo1 = math.cos(eo1)
            tem5 = 1.0 - coseo1 * axnl - sineo1 * aynl
            tem5 = (u - aynl * coseo1 + axnl * sineo1 - eo1) / tem5
            if math.fabs(tem5) >= KEPLER_MAX_STEP:
                tem5 = KEPLER_MAX_STEP if tem5 > 0.0 else -KEPLER_MAX_STEP
            eo1 = eo1 + tem5
            ktr += 1

        # Short-period preliminary quantities
        ecose = axnl * coseo1 + aynl * sineo1
        esine = axnl * sineo1 - aynl * coseo1
        el2 = axnl * axnl + aynl * aynl
        pl = am * (1.0 - el2)
        if pl < 0.0:
            raise PropagationError(4, t, f"semi-latus rectum {pl:.6g} is negative")

        rl = am * (1.0 - ecose)
        rdotl = math.sqrt(am) * esine / rl
        rvdotl = math.sqrt(pl) / rl
        betal = math.sqrt(1.0 - el2)
        temp = esine / (1.0 + betal)
        sinu = am / rl * (sineo1 - aynl - axnl * temp)
        cosu = am / rl * (coseo1 - axnl + aynl * temp)
        su = math.atan2(sinu, cosu)
        sin2u = (cosu + cosu) * sinu
        cos2u = 1.0 - 2.0 * sinu * sinu
        temp = 1.0 / pl
        temp1 = 0.5 * g.j2 * temp
        temp2 = temp1 * temp

        if self.method == "d":
            cosisq = cosip * cosip
            con41 = 3.0 * cosisq - 1.0
            x1mth2 = 1.0 - cosisq
            x7thm1 = 7.0 * cosisq - 1.0

        # Short-period periodics
        mrt = rl * (1.0 - 1.5 * temp2 * betal * con41) + 0.5 * temp1 * x1mth2 * cos2u
        su = su - 0.25 * temp2 * x7thm1 * sin2u
        xnode = nodep + 1.5 * temp2 * cosip * sin2u
        xinc = xincp + 1.5 * temp2 * cosip * sinip * cos2u
        mvt = rdotl - nm * temp1 * x1mth2 * sin2u / g.xke
        rvdot = rvdotl + nm * temp1 * (x1mth2 * cos2u + 1.5 * con41) / g.xke

        # Orientation vectors
        sinsu = math.sin(su)
        cossu = math.cos(su)
        snod = math.sin(xnode)
        cnod = math.cos(xnode)
        sini = math.sin(xinc)
        cosi = math.cos(xinc)
        xmx = -snod * cosi
        xmy = cnod * cosi
        ux = xmx * sinsu + cnod * cossu
        uy = xmy * sinsu + snod * cossu
        uz = sini * sinsu
        vx = xmx * cossu - cnod * sinsu
        vy = xmy * cossu - snod * sinsu
        vz = sini * cossu

        if mrt < 1.0:
            radius_km = mrt * g.radiusearthkm
            error = DecayedOrbit(t, radius_km)
            logger.error(str(error))
            raise error

        r = np.array([ux, uy, uz]) * (mrt * g.radiusearthkm)
        v = (np.array([ux, uy, uz]) * mvt + np.array([vx, vy, vz]) * rvdot) * vkmpersec
        return r, v

    def propagate_to(self, instant: JulianDate) -> Tuple[np.ndarray, np.ndarray]:
        """Propagate to an absolute instant; see propagate()."""
        return self.propagate(instant.difference(self.epoch).minutes)

    @property
    def period_minutes(self) -> float:
        return TWOPI / self.no_unkozai


def _long_period_xlcof(g: GravityModel, sinio: float, cosio: float) -> float:
    if math.fabs(cosio + 1.0) > TEMP4:
        return -0.25 * g.j3oj2 * sinio * (3.0 + 5.0 * cosio) / (1.0 + cosio)
    return -0.25 * g.j3oj2 * sinio * (3.0 + 5.0 * cosio) / TEMP4
