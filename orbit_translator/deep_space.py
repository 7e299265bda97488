"""
Deep-Space (SDP4) Perturbations

Lunar-solar secular and periodic terms and the 12-hour / 1-day geopotential
resonance used by SGP4 for orbits with periods of 225 minutes or more.

The resonance integrator is restarted from the epoch on every call instead of
caching its last state, so a DeepSpace instance is read-only after
construction and can be shared between threads. Integration uses the same
fixed 720-minute steps either way, so results are unchanged.

References:
    Vallado, D. A., Crawford, P., Hujsak, R., & Kelso, T. S. (2006).
    Revisiting Spacetrack Report #3. AIAA 2006-6753 (dscom, dpper, dsinit,
    dspace).
    Hoots, F. R., & Roehrich, R. L. (1980). Spacetrack Report No. 3.
"""

import logging
import math

from orbit_translator.constants import TWOPI

logger = logging.getLogger(__name__)

# Solar and lunar constants
ZES = 0.01675
ZEL = 0.05490
ZNS = 1.19459e-5
ZNL = 1.5835218e-4
C1SS = 2.9864797e-6
C1L = 4.7968065e-7
ZSINIS = 0.39785416
ZCOSIS = 0.91744867
ZCOSGS = 0.1945905
ZSINGS = -0.98088458

# Resonance constants
Q22 = 1.7891679e-6
Q31 = 2.1460748e-6
Q33 = 2.2123015e-7
ROOT22 = 1.7891679e-6
ROOT32 = 3.7393792e-7
ROOT44 = 7.3636953e-9
ROOT52 = 1.1428639e-7
ROOT54 = 2.1765803e-9
RPTIM = 4.37526908801129966e-3  # earth rotation, rad/min
FASX2 = 0.13130908
FASX4 = 2.8843198
FASX6 = 0.37448087
G22 = 5.7686396
G32 = 0.95240898
G44 = 1.8014998
G52 = 1.0508330
G54 = 4.4108898
STEPP = 720.0
STEPN = -720.0
STEP2 = 259200.0

# Below this inclination (rad) the Lyddane form of the periodics is used
LYDDANE_INCLINATION = 0.2
# Node rates are dropped within 3 deg of equatorial (prograde or retrograde)
EQUATORIAL_INCLINATION = 5.2359877e-2


class DeepSpace:
    """Lunar-solar and resonance terms for one set of mean elements."""

    def __init__(self, gravity, epoch, ecco, argpo, inclo, nodeo, mo, no, gsto,
                 mdot, nodedot, argpdot, xpidot):
        """
        Args:
            gravity: GravityModel used by the propagator
            epoch: Days since 1949 December 31 00:00 UT
            ecco, argpo, inclo, nodeo, mo: Mean elements at epoch (rad)
            no: Un-Kozai'd mean motion (rad/min)
            gsto: Greenwich sidereal time at epoch (rad)
            mdot, nodedot, argpdot: Near-Earth secular rates (rad/min)
            xpidot: argpdot + nodedot
        """
        self.argpo = argpo
        self.argpdot = argpdot
        self.gsto = gsto
        self.no = no

        self._init_lunar_solar(epoch, ecco, argpo, inclo, nodeo, no)
        self._init_resonance(gravity, ecco, argpo, inclo, nodeo, mo, no, gsto,
                             mdot, nodedot, xpidot)

    def _init_lunar_solar(self, epoch, ecco, argpo, inclo, nodeo, no):
        """Lunar-solar coefficients (Vallado's dscom)."""
        nm = no
        em = ecco
        snodm = math.sin(nodeo)
        cnodm = math.cos(nodeo)
        sinomm = math.sin(argpo)
        cosomm = math.cos(argpo)
        sinim = math.sin(inclo)
        cosim = math.cos(inclo)
        emsq = em * em
        betasq = 1.0 - emsq
        rtemsq = math.sqrt(betasq)

        # Initialize lunar solar terms
        day = epoch + 18261.5
        xnodce = math.fmod(4.5236020 - 9.2422029e-4 * day, TWOPI)
        stem = math.sin(xnodce)
        ctem = math.cos(xnodce)
        zcosil = 0.91375164 - 0.03568096 * ctem
        zsinil = math.sqrt(1.0 - zcosil * zcosil)
        zsinhl = 0.089683511 * stem / zsinil
        zcoshl = math.sqrt(1.0 - zsinhl * zsinhl)
        gam = 5.8351514 + 0.0019443680 * day
        zx = 0.39785416 * stem / zsinil
        zy = zcoshl * ctem + 0.91744867 * zsinhl * stem
        zx = math.atan2(zx, zy)
        zx = gam + zx - xnodce
        zcosgl = math.cos(zx)
        zsingl = math.sin(zx)

        # Solar terms first, then lunar
        zcosg = ZCOSGS
        zsing = ZSINGS
        zcosi = ZCOSIS
        zsini = ZSINIS
        zcosh = cnodm
        zsinh = snodm
        cc = C1SS
        xnoi = 1.0 / nm

        solar = None
        for body in ("sun", "moon"):
            a1 = zcosg * zcosh + zsing * zcosi * zsinh
            a3 = -zsing * zcosh + zcosg * zcosi * zsinh
            a7 = -zcosg * zsinh + zsing * zcosi * zcosh
            a8 = zsing * zsini
            a9 = zsing * zsinh + zcosg * zcosi * zcosh
            a10 = zcosg * zsini
            a2 = cosim * a7 + sinim * a8
            a4 = cosim * a9 + sinim * a10
            a5 = -sinim * a7 + cosim * a8
            a6 = -sinim * a9 + cosim * a10

            x1 = a1 * cosomm + a2 * sinomm
            x2 = a3 * cosomm + a4 * sinomm
            x3 = -a1 * sinomm + a2 * cosomm
            x4 = -a3 * sinomm + a4 * cosomm
            x5 = a5 * sinomm
            x6 = a6 * sinomm
            x7 = a5 * cosomm
            x8 = a6 * cosomm

            z31 = 12.0 * x1 * x1 - 3.0 * x3 * x3
            z32 = 24.0 * x1 * x2 - 6.0 * x3 * x4
            z33 = 12.0 * x2 * x2 - 3.0 * x4 * x4
            z1 = 3.0 * (a1 * a1 + a2 * a2) + z31 * emsq
            z2 = 6.0 * (a1 * a3 + a2 * a4) + z32 * emsq
            z3 = 3.0 * (a3 * a3 + a4 * a4) + z33 * emsq
            z11 = -6.0 * a1 * a5 + emsq * (-24.0 * x1 * x7 - 6.0 * x3 * x5)
            z12 = -6.0 * (a1 * a6 + a3 * a5) + emsq * (
                -24.0 * (x2 * x7 + x1 * x8) - 6.0 * (x3 * x6 + x4 * x5))
            z13 = -6.0 * a3 * a6 + emsq * (-24.0 * x2 * x8 - 6.0 * x4 * x6)
            z21 = 6.0 * a2 * a5 + emsq * (24.0 * x1 * x5 - 6.0 * x3 * x7)
            z22 = 6.0 * (a4 * a5 + a2 * a6) + emsq * (
                24.0 * (x2 * x5 + x1 * x6) - 6.0 * (x4 * x7 + x3 * x8))
            z23 = 6.0 * a4 * a6 + emsq * (24.0 * x2 * x6 - 6.0 * x4 * x8)
            z1 = z1 + z1 + betasq * z31
            z2 = z2 + z2 + betasq * z32
            z3 = z3 + z3 + betasq * z33
            s3 = cc * xnoi
            s2 = -0.5 * s3 / rtemsq
            s4 = s3 * rtemsq
            s1 = -15.0 * em * s4
            s5 = x1 * x3 + x2 * x4
            s6 = x2 * x3 + x1 * x4
            s7 = x2 * x4 - x1 * x3

            terms = {
                "s1": s1, "s2": s2, "s3": s3, "s4": s4, "s5": s5, "s6": s6, "s7": s7,
                "z1": z1, "z2": z2, "z3": z3,
                "z11": z11, "z12": z12, "z13": z13,
                "z21": z21, "z22": z22, "z23": z23,
                "z31": z31, "z32": z32, "z33": z33,
            }
            if body == "sun":
                solar = terms
                zcosg = zcosgl
                zsing = zsingl
                zcosi = zcosil
                zsini = zsinil
                zcosh = zcoshl * cnodm + zsinhl * snodm
                zsinh = snodm * zcoshl - cnodm * zsinhl
                cc = C1L
        lunar = terms

        self.zmol = math.fmod(4.7199672 + 0.22997150 * day - gam, TWOPI)
        self.zmos = math.fmod(6.2565837 + 0.017201977 * day, TWOPI)

        ss = solar
        self.se2 = 2.0 * ss["s1"] * ss["s6"]
        self.se3 = 2.0 * ss["s1"] * ss["s7"]
        self.si2 = 2.0 * ss["s2"] * ss["z12"]
        self.si3 = 2.0 * ss["s2"] * (ss["z13"] - ss["z11"])
        self.sl2 = -2.0 * ss["s3"] * ss["z2"]
        self.sl3 = -2.0 * ss["s3"] * (ss["z3"] - ss["z1"])
        self.sl4 = -2.0 * ss["s3"] * (-21.0 - 9.0 * emsq) * ZES
        self.sgh2 = 2.0 * ss["s4"] * ss["z32"]
        self.sgh3 = 2.0 * ss["s4"] * (ss["z33"] - ss["z31"])
        self.sgh4 = -18.0 * ss["s4"] * ZES
        self.sh2 = -2.0 * ss["s2"] * ss["z22"]
        self.sh3 = -2.0 * ss["s2"] * (ss["z23"] - ss["z21"])

        lt = lunar
        self.ee2 = 2.0 * lt["s1"] * lt["s6"]
        self.e3 = 2.0 * lt["s1"] * lt["s7"]
        self.xi2 = 2.0 * lt["s2"] * lt["z12"]
        self.xi3 = 2.0 * lt["s2"] * (lt["z13"] - lt["z11"])
        self.xl2 = -2.0 * lt["s3"] * lt["z2"]
        self.xl3 = -2.0 * lt["s3"] * (lt["z3"] - lt["z1"])
        self.xl4 = -2.0 * lt["s3"] * (-21.0 - 9.0 * emsq) * ZEL
        self.xgh2 = 2.0 * lt["s4"] * lt["z32"]
        self.xgh3 = 2.0 * lt["s4"] * (lt["z33"] - lt["z31"])
        self.xgh4 = -18.0 * lt["s4"] * ZEL
        self.xh2 = -2.0 * lt["s2"] * lt["z22"]
        self.xh3 = -2.0 * lt["s2"] * (lt["z23"] - lt["z21"])

        # Kept for the secular rates computed in _init_resonance
        self._solar = solar
        self._lunar = lunar
        self._emsq = emsq
        self._sinim = sinim
        self._cosim = cosim

    def _init_resonance(self, gravity, ecco, argpo, inclo, nodeo, mo, no, gsto,
                        mdot, nodedot, xpidot):
        """Lunar-solar secular rates and resonance coefficients (Vallado's dsinit)."""
        ss = self._solar
        lt = self._lunar
        emsq = self._emsq
        sinim = self._sinim
        cosim = self._cosim
        nm = no
        em = ecco

        self.irez = 0
        if 0.0034906585 < nm < 0.0052359877:
            self.irez = 1
        if 8.26e-3 <= nm <= 9.24e-3 and em >= 0.5:
            self.irez = 2

        near_equatorial = inclo < EQUATORIAL_INCLINATION or inclo > math.pi - EQUATORIAL_INCLINATION

        # Solar secular terms
        ses = ss["s1"] * ZNS * ss["s5"]
        sis = ss["s2"] * ZNS * (ss["z11"] + ss["z13"])
        sls = -ZNS * ss["s3"] * (ss["z1"] + ss["z3"] - 14.0 - 6.0 * emsq)
        sghs = ss["s4"] * ZNS * (ss["z31"] + ss["z33"] - 6.0)
        shs = -ZNS * ss["s2"] * (ss["z21"] + ss["z23"])
        if near_equatorial:
            shs = 0.0
        if sinim != 0.0:
            shs = shs / sinim
        sgs = sghs - cosim * shs

        # Lunar secular terms
        self.dedt = ses + lt["s1"] * ZNL * lt["s5"]
        self.didt = sis + lt["s2"] * ZNL * (lt["z11"] + lt["z13"])
        self.dmdt = sls - ZNL * lt["s3"] * (lt["z1"] + lt["z3"] - 14.0 - 6.0 * emsq)
        sghl = lt["s4"] * ZNL * (lt["z31"] + lt["z33"] - 6.0)
        shll = -ZNL * lt["s2"] * (lt["z21"] + lt["z23"])
        if near_equatorial:
            shll = 0.0
        self.domdt = sgs + sghl
        self.dnodt = shs
        if sinim != 0.0:
            self.domdt = self.domdt - cosim / sinim * shll
            self.dnodt = self.dnodt + shll / sinim

        self.d2201 = self.d2211 = self.d3210 = self.d3222 = 0.0
        self.d4410 = self.d4422 = self.d5220 = self.d5232 = 0.0
        self.d5421 = self.d5433 = 0.0
        self.del1 = self.del2 = self.del3 = 0.0
        self.xfact = 0.0
        self.xlamo = 0.0

        if self.irez == 0:
            return

        theta = math.fmod(gsto, TWOPI)
        aonv = math.pow(nm / gravity.xke, 2.0 / 3.0)

        if self.irez == 2:
            # Geopotential resonance for 12 hour orbits
            cosisq = cosim * cosim
            eoc = em * emsq
            g201 = -0.306 - (em - 0.64) * 0.440

            if em <= 0.65:
                g211 = 3.616 - 13.2470 * em + 16.2900 * emsq
                g310 = -19.302 + 117.3900 * em - 228.4190 * emsq + 156.5910 * eoc
                g322 = -18.9068 + 109.7927 * em - 214.6334 * emsq + 146.5816 * eoc
                g410 = -41.122 + 242.6940 * em - 471.0940 * emsq + 313.9530 * eoc
                g422 = -146.407 + 841.8800 * em - 1629.014 * emsq + 1083.4350 * eoc
                g520 = -532.114 + 3017.977 * em - 5740.032 * emsq + 3708.2760 * eoc
            else:
                g211 = -72.099 + 331.819 * em - 508.738 * emsq + 266.724 * eoc
                g310 = -346.844 + 1582.851 * em - 2415.925 * emsq + 1246.113 * eoc
                g322 = -342.585 + 1554.908 * em - 2366.899 * emsq + 1215.972 * eoc
                g410 = -1052.797 + 4758.686 * em - 7193.992 * emsq + 3651.957 * eoc
                g422 = -3581.690 + 16178.110 * em - 24462.770 * emsq + 12422.520 * eoc
                if em > 0.715:
                    g520 = -5149.66 + 29936.92 * em - 54087.36 * emsq + 31324.56 * eoc
                else:
                    g520 = 1464.74 - 4664.75 * em + 3763.64 * emsq

            if em < 0.7:
                g533 = -919.22770 + 4988.6100 * em - 9064.7700 * emsq + 5542.21 * eoc
                g521 = -822.71072 + 4568.6173 * em - 8491.4146 * emsq + 5337.524 * eoc
                g532 = -853.66600 + 4690.2500 * em - 8624.7700 * emsq + 5341.4 * eoc
            else:
                g533 = -37995.780 + 161616.52 * em - 229838.20 * emsq + 109377.94 * eoc
                g521 = -51752.104 + 218913.95 * em - 309468.16 * emsq + 146349.42 * eoc
                g532 = -40023.880 + 170470.89 * em - 242699.48 * emsq + 115605.82 * eoc

            sini2 = sinim * sinim
            f220 = 0.75 * (1.0 + 2.0 * cosim + cosisq)
            f221 = 1.5 * sini2
            f321 = 1.875 * sinim * (1.0 - 2.0 * cosim - 3.0 * cosisq)
            f322 = -1.875 * sinim * (1.0 + 2.0 * cosim - 3.0 * cosisq)
            f441 = 35.0 * sini2 * f220
            f442 = 39.3750 * sini2 * sini2
            f522 = 9.84375 * sinim * (
                sini2 * (1.0 - 2.0 * cosim - 5.0 * cosisq)
                + 0.33333333 * (-2.0 + 4.0 * cosim + 6.0 * cosisq))
            f523 = sinim * (
                4.92187512 * sini2 * (-2.0 - 4.0 * cosim + 10.0 * cosisq)
                + 6.56250012 * (1.0 + 2.0 * cosim - 3.0 * cosisq))
            f542 = 29.53125 * sinim * (
                2.0 - 8.0 * cosim + cosisq * (-12.0 + 8.0 * cosim + 10.0 * cosisq))
            f543 = 29.53125 * sinim * (
                -2.0 - 8.0 * cosim + cosisq * (12.0 + 8.0 * cosim - 10.0 * cosisq))

            xno2 = nm * nm
            ainv2 = aonv * aonv
            temp1 = 3.0 * xno2 * ainv2
            temp = temp1 * ROOT22
            self.d2201 = temp * f220 * g201
            self.d2211 = temp * f221 * g211
            temp1 = temp1 * aonv
            temp = temp1 * ROOT32
            self.d3210 = temp * f321 * g310
            self.d3222 = temp * f322 * g322
            temp1 = temp1 * aonv
            temp = 2.0 * temp1 * ROOT44
            self.d4410 = temp * f441 * g410
            self.d4422 = temp * f442 * g422
            temp1 = temp1 * aonv
            temp = temp1 * ROOT52
            self.d5220 = temp * f522 * g520
            self.d5232 = temp * f523 * g532
            temp = 2.0 * temp1 * ROOT54
            self.d5421 = temp * f542 * g521
            self.d5433 = temp * f543 * g533
            self.xlamo = math.fmod(mo + nodeo + nodeo - theta - theta, TWOPI)
            self.xfact = mdot + self.dmdt + 2.0 * (nodedot + self.dnodt - RPTIM) - no

        if self.irez == 1:
            # Synchronous resonance terms
            g200 = 1.0 + emsq * (-2.5 + 0.8125 * emsq)
            g310 = 1.0 + 2.0 * emsq
            g300 = 1.0 + emsq * (-6.0 + 6.60937 * emsq)
            f220 = 0.75 * (1.0 + cosim) * (1.0 + cosim)
            f311 = 0.9375 * sinim * sinim * (1.0 + 3.0 * cosim) - 0.75 * (1.0 + cosim)
            f330 = 1.0 + cosim
            f330 = 1.875 * f330 * f330 * f330
            self.del1 = 3.0 * nm * nm * aonv * aonv
            self.del2 = 2.0 * self.del1 * f220 * g200 * Q22
            self.del3 = 3.0 * self.del1 * f330 * g300 * Q33 * aonv
            self.del1 = self.del1 * f311 * g310 * Q31 * aonv
            self.xlamo = math.fmod(mo + nodeo + argpo - theta, TWOPI)
            self.xfact = mdot + xpidot - RPTIM + self.dmdt + self.domdt + self.dnodt - no

        logger.debug(f"Deep-space resonance class {self.irez} (0=none, 1=synchronous, 2=12-hour)")

    def secular(self, t, em, argpm, inclm, mm, nodem):
        """
        Apply lunar-solar secular rates and resonance effects (Vallado's dspace).

        Args:
            t: Minutes since epoch
            em, argpm, inclm, mm, nodem: Elements after near-Earth secular update

        Returns:
            Tuple of (em, argpm, inclm, mm, nodem, nm)
        """
        no = self.no
        theta = math.fmod(self.gsto + t * RPTIM, TWOPI)
        em = em + self.dedt * t
        inclm = inclm + self.didt * t
        argpm = argpm + self.domdt * t
        nodem = nodem + self.dnodt * t
        mm = mm + self.dmdt * t
        nm = no

        if self.irez == 0:
            return em, argpm, inclm, mm, nodem, nm

        # Integrate from epoch in fixed steps toward t
        atime = 0.0
        xni = no
        xli = self.xlamo
        delt = STEPP if t > 0.0 else STEPN
        ft = 0.0

        while True:
            xndt, xldot, xnddt = self._resonance_rates(atime, xli, xni)
            if math.fabs(t - atime) >= STEPP:
                xli = xli + xldot * delt + xndt * STEP2
                xni = xni + xndt * delt + xnddt * STEP2
                atime = atime + delt
            else:
                ft = t - atime
                break

        nm = xni + xndt * ft + xnddt * ft * ft * 0.5
        xl = xli + xldot * ft + xndt * ft * ft * 0.5
        if self.irez != 1:
            mm = xl - 2.0 * nodem + 2.0 * theta
        else:
            mm = xl - nodem - argpm + theta
        dndt = nm - no
        nm = no + dndt
        return em, argpm, inclm, mm, nodem, nm

    def _resonance_rates(self, atime, xli, xni):
        if self.irez != 2:
            # Near-synchronous resonance terms
            xndt = (self.del1 * math.sin(xli - FASX2)
                    + self.del2 * math.sin(2.0 * (xli - FASX4))
                    + self.del3 * math.sin(3.0 * (xli - FASX6)))
            xldot = xni + self.xfact
            xnddt = (self.del1 * math.cos(xli - FASX2)
                     + 2.0 * self.del2 * math.cos(2.0 * (xli - FASX4))
                     + 3.0 * self.del3 * math.cos(3.0 * (xli - FASX6)))
            xnddt = xnddt * xldot
        else:
            # Near-half-day resonance terms
            xomi = self.argpo + self.argpdot * atime
            x2omi = xomi + xomi
            x2li = xli + xli
            xndt = (self.d2201 * math.sin(x2omi + xli - G22)
                    + self.d2211 * math.sin(xli - G22)
                    + self.d3210 * math.sin(xomi + xli - G32)
                    + self.d3222 * math.sin(-xomi + xli - G32)
                    + self.d4410 * math.sin(x2omi + x2li - G44)
                    + self.d4422 * math.sin(x2li - G44)
                    + self.d5220 * math.sin(xomi + xli - G52)
                    + self.d5232 * math.sin(-xomi + xli - G52)
                    + self.d5421 * math.sin(xomi + x2li - G54)
                    + self.d5433 * math.sin(-xomi + x2li - G54))
            xldot = xni + self.xfact
            xnddt = (self.d2201 * math.cos(x2omi + xli - G22)
                     + self.d2211 * math.cos(xli - G22)
                     + self.d3210 * math.cos(xomi + xli - G32)
                     + self.d3222 * math.cos(-xomi + xli - G32)
                     + self.d5220 * math.cos(xomi + xli - G52)
                     + self.d5232 * math.cos(-xomi + xli - G52)
                     + 2.0 * (self.d4410 * math.cos(x2omi + x2li - G44)
                              + self.d4422 * math.cos(x2li - G44)
                              + self.d5421 * math.cos(xomi + x2li - G54)
                              + self.d5433 * math.cos(-xomi + x2li - G54)))
            xnddt = xnddt * xldot
        return xndt, xldot, xnddt

    def periodics(self, t, ep, inclp, nodep, argpp, mp):
        """
        Apply lunar-solar periodics (Vallado's dpper), with the Lyddane
        modification for inclinations below 0.2 rad.

        Returns:
            Tuple of (ep, inclp, nodep, argpp, mp)
        """
        # Solar terms
        zm = self.zmos + ZNS * t
        zf = zm + 2.0 * ZES * math.sin(zm)
        sinzf = math.sin(zf)
        f2 = 0.5 * sinzf * sinzf - 0.25
        f3 = -0.5 * sinzf * math.cos(zf)
        ses = self.se2 * f2 + self.se3 * f3
        sis = self.si2 * f2 + self.si3 * f3
        sls = self.sl2 * f2 + self.sl3 * f3 + self.sl4 * sinzf
        sghs = self.sgh2 * f2 + self.sgh3 * f3 + self.sgh4 * sinzf
        shs = self.sh2 * f2 + self.sh3 * f3

        # Lunar terms
        zm = self.zmol + ZNL * t
        zf = zm + 2.0 * ZEL * math.sin(zm)
        sinzf = math.sin(zf)
        f2 = 0.5 * sinzf * sinzf - 0.25
        f3 = -0.5 * sinzf * math.cos(zf)
        sel = self.ee2 * f2 + self.e3 * f3
        sil = self.xi2 * f2 + self.xi3 * f3
        sll = self.xl2 * f2 + self.xl3 * f3 + self.xl4 * sinzf
        sghl = self.xgh2 * f2 + self.xgh3 * f3 + self.xgh4 * sinzf
        shll = self.xh2 * f2 + self.xh3 * f3

        pe = ses + sel
        pinc = sis + sil
        pl = sls + sll
        pgh = sghs + sghl
        ph = shs + shll

        inclp = inclp + pinc
        ep = ep + pe
        sinip = math.sin(inclp)
        cosip = math.cos(inclp)

        if inclp >= LYDDANE_INCLINATION:
            ph = ph / sinip
            pgh = pgh - cosip * ph
            argpp = argpp + pgh
            nodep = nodep + ph
            mp = mp + pl
        else:
            # Lyddane modification avoids the 1/sin(i) singularity
            sinop = math.sin(nodep)
            cosop = math.cos(nodep)
            alfdp = sinip * sinop
            betdp = sinip * cosop
            dalf = ph * cosop + pinc * cosip * sinop
            dbet = -ph * sinop + pinc * cosip * cosop
            alfdp = alfdp + dalf
            betdp = betdp + dbet
            nodep = math.fmod(nodep, TWOPI)
            xls = mp + argpp + cosip * nodep
            dls = pl + pgh - pinc * nodep * sinip
            xls = math.fmod(xls + dls, TWOPI)
            xnoh = nodep
            nodep = math.atan2(alfdp, betdp)
            if math.fabs(xnoh - nodep) > math.pi:
                if nodep < xnoh:
                    nodep = nodep + TWOPI
                else:
                    nodep = nodep - TWOPI
            mp = mp + pl
            argpp = xls - mp - cosip * nodep

        return ep, inclp, nodep, argpp, mp
