# Schedule Feature - Seed data

from app.features.medications.schemas import MedicationDefinition


def _med(id: str, name: str, dosage: str, time_slot: str, frequency: str) -> MedicationDefinition:
    return MedicationDefinition(
        id=id, name=name, dosage=dosage, time_slot=time_slot, frequency=frequency
    )


# Written to the store the first time the definitions document is read.
DEFAULT_MEDICATIONS = [
    _med("t4", "T4", "", "Ayunas", "Diario"),
    _med("levecom-m", "Levecom", "500mg", "Mañana Post desayuno", "Diario"),
    _med("deslefex", "Deslefex", "", "Mañana Post desayuno", "Diario"),
    _med("lukast", "Lukast", "", "Mañana Post desayuno", "Diario"),
    _med("hidrotisona-m", "Hidrotisona", "10mg", "Mañana Post desayuno", "Diario"),
    _med("velsarten", "Velsarten", "160mg", "Mañana Post desayuno", "Diario"),
    _med("amlodipino", "Amlodipino", "1/2 5mg", "Mañana Post desayuno", "Diario"),
    _med("dexlansoprazol", "Dexlansoprazol", "", "Mañana Post desayuno", "Diario"),
    _med("hidrotisona-ac", "Hidrotisona", "", "Antes de Comer 13hs", "Diario"),
    _med("b12", "B12", "3 veces x semana sublingual", "Antes de Comer 13hs", "Martes, Jueves, Sábados"),
    _med("hidrotisona-t", "Hidrotisona", "1/2 5mg", "Tarde 18hs", "Diario"),
    _med("levecom-n", "Levecom", "", "Noche", "Diario"),
    _med("novo-insomnum", "Novo Insomnum", "", "Noche", "Diario"),
    _med("roovex", "Reorex", "10mg", "Noche", "Diario"),
    _med("vitamina-d", "Vitamina D (Firesole/Apolar)", "1 vez al mes", "Mensual", "Último Martes del Mes"),
    _med("miopropan", "Mipropan", "", "Según necesidad", "En caso de diarrea"),
    _med("naproxeno", "Naproxeno", "", "Según necesidad", "En caso de dolor de cabeza"),
]


CARE_GUIDANCE = [
    "Tomar la presión 2 veces por semana y anotarlo.",
    "En caso de diarrea, suministrar Miopropan.",
    "En caso de dolor de cabeza, suministrar Naproxeno.",
    "Avisar a la familia en caso de: Diarrea, fiebre, infección.",
]


def default_medications() -> list[MedicationDefinition]:
    """Fresh copies of the seed list, safe to mutate."""
    return [med.model_copy() for med in DEFAULT_MEDICATIONS]
