"""
Cross-section engine checks.

Tests:
    1. Spin-sum contraction conventions
    2. Compton scattering reproduces Klein-Nishina
    3. ampSquared is real and non-negative for all five processes
    4. Pure states of opposite helicity add up to the summed SDM
    5. Opposite helicities give different cross sections
    6. Covariant amplitudes are boost invariant; all results rotation invariant
    7. Identical final electrons are antisymmetric; photons are gauge invariant
    8. Process registry lookup
    9. Amplitude sanity warnings reach the injected callback
   10. Wrong number of legs raises
"""
import logging
import math
import sys
from pathlib import Path
sys.path.append(str(Path(__file__).resolve().parents[1]))

import numpy as np
import pytest

from qedcross.conservation import check_conservation, two_body_decay
from qedcross.constants import ALPHA_QED, ELECTRON_MASS
from qedcross.cross_sections import (
    INCOMING,
    OUTGOING,
    AmplitudeWarning,
    Bremsstrahlung,
    ComptonScattering,
    CrossSection,
    EEBremsstrahlung,
    PairProduction,
    TripletProduction,
    bremsstrahlung,
    bremsstrahlung_kinematics,
    compton,
    compton_kinematics,
    ee_bremsstrahlung,
    get_cross_section,
    klein_nishina,
    list_registered_processes,
    pair_kinematics,
    pair_production,
    register,
    spin_sum,
    triplet_production,
)
from qedcross.kinematics import ComplexFourVector, FourVector, ThreeVector
from qedcross.lorentz import LorentzBoost, ThreeRotation
from qedcross.particles import (
    Lepton,
    Photon,
    helicity_sdm,
    linear_polarization_sdm,
    summed_sdm,
    unpolarized_sdm,
)

M = ELECTRON_MASS


# ----------------------------- Kinematics ---------------------------------
def compton_states(energy=0.01, theta=1.0, phi=0.0):
    g_in, e_in, g_out, e_out = compton_kinematics(energy, theta, phi)
    return [
        Photon(g_in, sdm=unpolarized_sdm()),
        Lepton(e_in, sdm=unpolarized_sdm()),
        Photon(g_out, sdm=summed_sdm()),
        Lepton(e_out, sdm=summed_sdm()),
    ]


def bremsstrahlung_states(energy=2.0, k=0.5, theta_e=0.001, theta_g=0.002):
    e_in, e_out, g_out = bremsstrahlung_kinematics(energy, k, theta_e, theta_g, phi=0.4)
    return [
        Lepton(e_in, sdm=unpolarized_sdm()),
        Lepton(e_out, sdm=summed_sdm()),
        Photon(g_out, sdm=summed_sdm()),
    ]


def pair_states(energy=5.0, fraction=0.3, theta_e=0.0002, theta_p=0.0003):
    g_in, e_out, p_out = pair_kinematics(energy, fraction, theta_e, theta_p, phi=-0.8)
    return [
        Photon(g_in, sdm=unpolarized_sdm()),
        Lepton(e_out, sdm=summed_sdm()),
        Lepton(p_out, sdm=summed_sdm()),
    ]


def triplet_states():
    g = FourVector(0.1, 0.0, 0.0, 0.1)
    e0 = FourVector(M, 0.0, 0.0, 0.0)
    p3, pair = two_body_decay(g + e0, M, 0.004, direction=ThreeVector(0.3, 0.5, 0.8))
    p1, p2 = two_body_decay(pair, M, M, direction=ThreeVector(-0.6, 0.2, 0.4))
    assert check_conservation([g, e0], [p1, p2, p3])
    return [
        Photon(g, sdm=unpolarized_sdm()),
        Lepton(e0, sdm=unpolarized_sdm()),
        Lepton(p1, sdm=summed_sdm()),
        Lepton(p2, sdm=summed_sdm()),
        Lepton(p3, sdm=summed_sdm()),
    ]


def ee_bremsstrahlung_states():
    e0 = FourVector(0.05, 0.0, 0.0, math.sqrt(0.05 ** 2 - M ** 2))
    e1 = FourVector(M, 0.0, 0.0, 0.0)
    k, pair = two_body_decay(e0 + e1, 0.0, 0.004, direction=ThreeVector(0.2, -0.4, 0.9))
    p2, p3 = two_body_decay(pair, M, M, direction=ThreeVector(0.7, 0.1, -0.3))
    assert check_conservation([e0, e1], [p2, p3, k])
    return [
        Lepton(e0, sdm=unpolarized_sdm()),
        Lepton(e1, sdm=unpolarized_sdm()),
        Lepton(p2, sdm=summed_sdm()),
        Lepton(p3, sdm=summed_sdm()),
        Photon(k, sdm=summed_sdm()),
    ]


PROCESSES = [
    ("compton", compton_states),
    ("bremsstrahlung", bremsstrahlung_states),
    ("pair_production", pair_states),
    ("triplet_production", triplet_states),
    ("ee_bremsstrahlung", ee_bremsstrahlung_states),
]

# processes whose amplitudes carry no frame-fixed external-field vertex
COVARIANT = [p for p in PROCESSES if p[0] in ("compton", "triplet_production", "ee_bremsstrahlung")]


def _with_sdm(states, leg, sdm):
    states = list(states)
    states[leg] = states[leg].with_sdm(sdm)
    return states


def _random_density_matrix(rng):
    x = rng.normal(size=(2, 2)) + 1j * rng.normal(size=(2, 2))
    rho = x @ x.conj().T
    return rho / np.trace(rho).real


class _Collector:
    def __init__(self):
        self.records = []

    def __call__(self, record):
        self.records.append(record)


# ------------------------------ Spin sums ---------------------------------
def test_spin_sum_pairing_conventions():
    amps = np.array([1.0 + 2.0j, -0.5 + 0.3j])
    c = np.array([0.6, 0.8j])
    sdm = np.outer(c, c.conj())
    # incoming: |sum_i c_i A_i|^2, outgoing: |sum_i c_i^* A_i|^2
    assert spin_sum(amps, [sdm], [INCOMING]) == pytest.approx(abs(c @ amps) ** 2)
    assert spin_sum(amps, [sdm], [OUTGOING]) == pytest.approx(abs(c.conj() @ amps) ** 2)
    print("✓ SDM pairing conventions")


def test_spin_sum_rejects_bad_input():
    with pytest.raises(ValueError):
        spin_sum(np.ones((2, 2)), [summed_sdm()], [INCOMING])
    with pytest.raises(ValueError):
        spin_sum(np.ones(2), [summed_sdm()], ["sideways"])


# ---------------------------- Klein-Nishina -------------------------------
@pytest.mark.parametrize("energy", [0.001, 0.01, 1.0])
@pytest.mark.parametrize("theta", [0.0, math.pi / 4, math.pi / 2, math.pi])
def test_compton_matches_klein_nishina(energy, theta):
    states = compton_states(energy, theta, phi=0.3)
    expected = klein_nishina(states[0].momentum.E, states[2].momentum.E)
    assert compton(*states) == pytest.approx(expected, rel=1e-6)


def test_klein_nishina_reference_scenario():
    """1 GeV photon on an electron at rest, scattered at 90 degrees."""
    states = compton_states(1.0, math.pi / 2)
    dsigma = compton(*states)
    expected = klein_nishina(1.0, states[2].momentum.E)
    assert dsigma == pytest.approx(expected, rel=1e-6)
    # forward scattering: classical r_e^2 in microbarns
    r_e_sqr = klein_nishina(0.01, 0.01)
    assert r_e_sqr == pytest.approx(79407.7, rel=1e-4)
    print(f"✓ Compton at 90 deg: {dsigma:.6e} microbarns/sr")


def test_compton_alpha_override_scales():
    states = compton_states()
    base = ComptonScattering()(*states)
    doubled = ComptonScattering(alpha=2 * ALPHA_QED)(*states)
    assert doubled == pytest.approx(4 * base, rel=1e-12)


# ------------------------- Reality / positivity ---------------------------
@pytest.mark.parametrize("key,builder", PROCESSES)
def test_amp_squared_real_and_positive(key, builder):
    collector = _Collector()
    model = get_cross_section(key)
    states = builder()
    amp2 = model.amplitude_squared(*states, on_warning=collector)
    assert amp2.real > 0
    assert abs(amp2.imag) <= 1e-8 * abs(amp2)
    assert model(*states, on_warning=collector) > 0
    assert collector.records == []


@pytest.mark.parametrize("key,builder", PROCESSES)
def test_amp_squared_positive_for_mixed_states(key, builder):
    rng = np.random.default_rng(42)
    collector = _Collector()
    model = get_cross_section(key)
    states = [s.with_sdm(_random_density_matrix(rng)) for s in builder()]
    amp2 = model.amplitude_squared(*states, on_warning=collector)
    assert amp2.real >= 0
    assert abs(amp2.imag) <= 1e-8 * abs(amp2)
    assert collector.records == []


# ------------------------ Pure-state decomposition ------------------------
@pytest.mark.parametrize("key,builder", PROCESSES)
def test_pure_states_sum_to_summed_sdm(key, builder):
    model = get_cross_section(key)
    states = builder()
    for leg, state in enumerate(states):
        up, down = (+1, -1) if isinstance(state, Photon) else (+0.5, -0.5)
        total = model(*_with_sdm(states, leg, summed_sdm()))
        parts = (model(*_with_sdm(states, leg, helicity_sdm(up)))
                 + model(*_with_sdm(states, leg, helicity_sdm(down))))
        assert parts == pytest.approx(total, rel=1e-12), f"{key}: leg {model.legs[leg]}"


def test_linear_polarizations_sum_to_summed_sdm():
    states = compton_states()
    total = compton(*_with_sdm(states, 0, summed_sdm()))
    parallel = compton(*_with_sdm(states, 0, linear_polarization_sdm(0.0)))
    perpendicular = compton(*_with_sdm(states, 0, linear_polarization_sdm(math.pi / 2)))
    assert parallel + perpendicular == pytest.approx(total, rel=1e-12)
    # scattering favours the plane perpendicular to the beam polarization
    assert perpendicular > parallel


# --------------------------- Helicity dependence --------------------------
@pytest.mark.parametrize("key,builder,photon_leg,lepton_leg", [
    ("compton", lambda: compton_states(0.01, math.pi / 3), 0, 1),
    ("bremsstrahlung", bremsstrahlung_states, 2, 0),
    ("pair_production", pair_states, 0, 1),
    ("triplet_production", triplet_states, 0, 2),
    ("ee_bremsstrahlung", ee_bremsstrahlung_states, 4, 0),
])
def test_opposite_helicities_differ(key, builder, photon_leg, lepton_leg):
    model = get_cross_section(key)
    states = _with_sdm(builder(), photon_leg, helicity_sdm(+1))
    plus = model(*_with_sdm(states, lepton_leg, helicity_sdm(+0.5)))
    minus = model(*_with_sdm(states, lepton_leg, helicity_sdm(-0.5)))
    assert plus > 0 and minus > 0
    assert abs(plus - minus) > 1e-6 * (plus + minus), f"{key}: {plus} vs {minus}"


# --------------------------- Frame independence ---------------------------
@pytest.mark.parametrize("key,builder", COVARIANT)
def test_boost_invariance_of_covariant_amplitudes(key, builder):
    model = get_cross_section(key)
    states = builder()
    boost = LorentzBoost((0.2, -0.3, 0.6))
    boosted = [s.transformed(boost) for s in states]
    assert model.amplitude_squared(*boosted).real == pytest.approx(
        model.amplitude_squared(*states).real, rel=1e-6)


def test_compton_center_of_mass_frame():
    """The lab result follows from the CM-frame amplitude and lab-frame factors."""
    model = ComptonScattering()
    states = compton_states(0.01, 1.2)
    total = states[0].momentum + states[1].momentum
    cm = [s.transformed(LorentzBoost.to_rest(total)) for s in states]
    assert abs(cm[0].momentum.vect.length() - cm[1].momentum.vect.length()) < 1e-12
    lab = model(*states)
    rebuilt = (model.hbarc_sqr * model.alpha ** 2
               * model.amplitude_squared(*cm).real * model.kinematic_factor(*states))
    assert rebuilt == pytest.approx(lab, rel=1e-6)


@pytest.mark.parametrize("key,builder", PROCESSES)
def test_rotation_invariance(key, builder):
    model = get_cross_section(key)
    states = builder()
    rot = ThreeRotation.from_euler(0.7, 1.1, -0.4)
    rotated = [s.transformed(rot) for s in states]
    assert model(*rotated) == pytest.approx(model(*states), rel=1e-7)


# ------------------ Identical electrons and gauge invariance --------------
class _GaugePhoton(Photon):
    """Photon whose polarization vectors are replaced by k / E."""

    def eps(self, j):
        return ComplexFourVector.from_real(self.momentum) / self.momentum.E


@pytest.mark.parametrize("key,builder,legs,axes", [
    ("triplet_production", triplet_states, (3, 4), (3, 4)),
    ("ee_bremsstrahlung", ee_bremsstrahlung_states, (2, 3), (2, 3)),
])
def test_identical_final_electrons_antisymmetric(key, builder, legs, axes):
    model = get_cross_section(key)
    states = builder()
    swapped = list(states)
    swapped[legs[0]], swapped[legs[1]] = states[legs[1]], states[legs[0]]
    amps = model.amplitudes(*states)
    amps_swapped = model.amplitudes(*swapped)
    scale = np.abs(amps).max()
    assert scale > 0
    np.testing.assert_allclose(amps_swapped, -np.swapaxes(amps, *axes), rtol=0, atol=1e-12 * scale)
    # the spin-summed result does not depend on the labelling
    assert model.amplitude_squared(*swapped).real == pytest.approx(
        model.amplitude_squared(*states).real, rel=1e-12)


@pytest.mark.parametrize("key,builder,photon_leg", [
    ("compton", compton_states, 0),
    ("compton", compton_states, 2),
    ("bremsstrahlung", lambda: bremsstrahlung_states(0.05, 0.02, 0.3, 0.5), 2),
    ("pair_production", lambda: pair_states(0.05, 0.4, 0.3, 0.5), 0),
    ("triplet_production", triplet_states, 0),
    ("ee_bremsstrahlung", ee_bremsstrahlung_states, 4),
])
def test_gauge_invariance(key, builder, photon_leg):
    """Replacing a photon polarization by its momentum cancels the amplitude."""
    model = get_cross_section(key)
    states = builder()
    photon = states[photon_leg]
    gauge_states = list(states)
    gauge_states[photon_leg] = _GaugePhoton(photon.momentum, sdm=photon.sdm)
    physical = model.amplitudes(*states)
    gauge = model.amplitudes(*gauge_states)
    assert np.abs(gauge).max() < 1e-9 * np.abs(physical).max(), f"{key}: leg {photon_leg}"


# ------------------------------- Registry ---------------------------------
def test_registry_lookup():
    assert isinstance(get_cross_section("compton"), ComptonScattering)
    assert isinstance(get_cross_section("bremsstrahlung"), Bremsstrahlung)
    assert isinstance(get_cross_section("pair_production"), PairProduction)
    assert isinstance(get_cross_section("triplet_production"), TripletProduction)
    assert isinstance(get_cross_section("ee_bremsstrahlung"), EEBremsstrahlung)
    with pytest.raises(KeyError):
        get_cross_section("moller")
    print("✓ Registry lookup works")


def test_register_custom_model():
    register("compton_strong", ComptonScattering(alpha=0.1))
    try:
        assert get_cross_section("compton_strong").alpha == 0.1
        assert "compton_strong" in list_registered_processes()
    finally:
        from qedcross.cross_sections import registry
        registry._REGISTRY.pop("compton_strong")
    with pytest.raises(TypeError):
        register("bogus", object())


def test_list_processes():
    processes = list_registered_processes()
    for key, _ in PROCESSES:
        assert key in processes
    print(f"\n📋 Registered processes: {len(processes)}")
    for key, description in processes.items():
        print(f"   {key}: {description}")


@pytest.mark.parametrize("function,builder", [
    (compton, compton_states),
    (bremsstrahlung, bremsstrahlung_states),
    (pair_production, pair_states),
    (triplet_production, triplet_states),
    (ee_bremsstrahlung, ee_bremsstrahlung_states),
])
def test_functions_use_registered_models(function, builder):
    states = builder()
    model = get_cross_section(function.__name__)
    assert function(*states) == model(*states)


def test_model_metadata():
    for key, builder in PROCESSES:
        model = get_cross_section(key)
        assert isinstance(model, CrossSection)
        assert len(model.legs) == len(model.roles) == len(builder())
        assert "microbarns" in model.units


# ---------------------------- Sanity warnings -----------------------------
def test_negative_weight_reaches_callback():
    collector = _Collector()
    states = _with_sdm(compton_states(), 2, -summed_sdm())
    result = compton(*states, on_warning=collector)
    assert result < 0
    assert len(collector.records) == 1
    record = collector.records[0]
    assert isinstance(record, AmplitudeWarning)
    assert record.process == "compton"
    assert record.amp_squared.real < 0
    assert "compton" in record.message


def test_efficiency_sdm_with_negative_eigenvalue():
    """diag(1, -1) on a final leg measures a helicity difference."""
    collector = _Collector()
    states = compton_states(0.01, math.pi / 3)
    states = _with_sdm(states, 0, helicity_sdm(+1))
    states = _with_sdm(states, 1, helicity_sdm(+0.5))
    difference = compton(*_with_sdm(states, 2, np.diag([1.0, -1.0])), on_warning=collector)
    plus = compton(*_with_sdm(states, 2, helicity_sdm(+1)))
    minus = compton(*_with_sdm(states, 2, helicity_sdm(-1)))
    assert difference == pytest.approx(plus - minus, rel=1e-9, abs=1e-12 * (plus + minus))
    assert len(collector.records) == (1 if plus < minus else 0)


def test_warning_logged_without_callback(caplog):
    states = _with_sdm(bremsstrahlung_states(), 1, -summed_sdm())
    with caplog.at_level(logging.WARNING, logger="qedcross.cross_sections.spin_sum"):
        result = bremsstrahlung(*states)
    assert result < 0
    messages = [r.getMessage() for r in caplog.records]
    assert any("bad bremsstrahlung amplitudes" in m for m in messages)
    assert any("AAbar[0][0]" in m for m in messages)


def test_constructor_callback_used_by_default():
    collector = _Collector()
    model = PairProduction(on_warning=collector)
    states = _with_sdm(pair_states(), 0, -unpolarized_sdm())
    model(*states)
    assert len(collector.records) == 1
    assert collector.records[0].process == "pair_production"


# -------------------------------- Errors ----------------------------------
def test_wrong_leg_count_raises():
    states = compton_states()
    with pytest.raises(ValueError):
        ComptonScattering()(*states[:3])
    with pytest.raises(ValueError):
        TripletProduction()(*states)
    with pytest.raises(ValueError):
        EEBremsstrahlung().amplitude_squared(*states)
    with pytest.raises(ValueError):
        PairProduction()(*states)
    with pytest.raises(TypeError):
        triplet_production(*states)


if __name__ == "__main__":
    print("=" * 60)
    print("Cross Section Engine Checks")
    print("=" * 60)

    test_spin_sum_pairing_conventions()
    test_klein_nishina_reference_scenario()
    test_registry_lookup()
    test_list_processes()
    for key, builder in PROCESSES:
        test_amp_squared_real_and_positive(key, builder)
        test_pure_states_sum_to_summed_sdm(key, builder)
        test_rotation_invariance(key, builder)
        print(f"✓ {key}: real, positive, pure-state sum, rotation invariant")
    for key, builder in COVARIANT:
        test_boost_invariance_of_covariant_amplitudes(key, builder)
        print(f"✓ {key}: boost invariant")
    test_identical_final_electrons_antisymmetric("triplet_production", triplet_states, (3, 4), (3, 4))
    test_identical_final_electrons_antisymmetric("ee_bremsstrahlung", ee_bremsstrahlung_states, (2, 3), (2, 3))
    print("✓ Identical final electrons antisymmetric")
    test_gauge_invariance("triplet_production", triplet_states, 0)
    test_gauge_invariance("ee_bremsstrahlung", ee_bremsstrahlung_states, 4)
    print("✓ Eight-diagram amplitudes gauge invariant")

    print("\n" + "=" * 60)
    print("✅ All cross-section tests passed")
    print("=" * 60)
