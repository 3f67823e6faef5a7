import random
from concurrent.futures import ThreadPoolExecutor

from httpshape.models.patients import PatientIn
from httpshape.services.patient_store import PatientStore, generate_random_patient


def test_store_is_seeded_with_sequential_ids() -> None:
    store = PatientStore(seed_count=5)
    patients = store.list_all()
    assert [p.id for p in patients] == [1, 2, 3, 4, 5]
    assert all(p.email.endswith("@example.com") for p in patients)


def test_crud_roundtrip() -> None:
    store = PatientStore(seed_count=0)
    created = store.create(PatientIn(first_name="Ada", last_name="Lovelace"))
    assert created.id == 1
    assert store.get(1) == created

    updated = store.update(1, PatientIn(first_name="Ada", last_name="King"))
    assert updated is not None
    assert updated.last_name == "King"

    assert store.delete(1)
    assert not store.delete(1)
    assert store.get(1) is None
    assert store.update(1, PatientIn()) is None


def test_generator_is_deterministic_for_a_seeded_rng() -> None:
    a = generate_random_patient(random.Random(7))
    b = generate_random_patient(random.Random(7))
    assert a == b
    assert a.birth_date is not None
    assert 1940 <= a.birth_date.year <= 2020


def test_seeding_does_not_reseed_between_patients() -> None:
    store = PatientStore(seed_count=20, rng=random.Random(1))
    phones = {p.phone for p in store.list_all()}
    assert len(phones) > 1


def test_concurrent_creates_get_unique_ids() -> None:
    store = PatientStore(seed_count=0)
    with ThreadPoolExecutor(max_workers=8) as pool:
        created = list(pool.map(lambda i: store.create(PatientIn(first_name=str(i))), range(100)))

    assert sorted(p.id for p in created) == list(range(1, 101))
