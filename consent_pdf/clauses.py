"""
Legal clauses of the informed consent template.

The table order is the legal order of the document. Changing the order or
the wording is a content change and must be reviewed as such.

License: MIT
"""

from dataclasses import dataclass
from typing import Optional, Tuple


@dataclass(frozen=True)
class ClauseSpec:
    """A titled clause with an adult text and an optional minor variant."""
    id: str
    title: str
    adult_text: str
    minor_text: Optional[str] = None


def select_text(clause: ClauseSpec, is_minor: bool) -> str:
    """Pick the clause body for the subject; minors fall back to the adult text."""
    if is_minor:
        return clause.minor_text or clause.adult_text
    return clause.adult_text


CONSENT_CLAUSES: Tuple[ClauseSpec, ...] = (
    ClauseSpec(
        id="objeto",
        title="Objeto del proceso de orientación",
        adult_text=(
            "Declaro que he sido informado(a) de manera clara y suficiente sobre la naturaleza, "
            "los objetivos y la metodología del proceso de orientación psicológica al que accedo "
            "de forma libre. Entiendo que se trata de un acompañamiento profesional orientado al "
            "bienestar emocional y al desarrollo personal, y que no sustituye la atención médica "
            "o psiquiátrica cuando esta sea necesaria."
        ),
        minor_text=(
            "En calidad de representante legal del menor, declaro que he sido informado(a) de "
            "manera clara y suficiente sobre la naturaleza, los objetivos y la metodología del "
            "proceso de orientación psicológica al que accede el menor a mi cargo. Entiendo que "
            "se trata de un acompañamiento profesional orientado a su bienestar emocional y a su "
            "desarrollo personal, y que no sustituye la atención médica o psiquiátrica cuando "
            "esta sea necesaria."
        ),
    ),
    ClauseSpec(
        id="voluntariedad",
        title="Participación voluntaria",
        adult_text=(
            "Mi participación es voluntaria. Puedo retirar este consentimiento y dar por terminado "
            "el proceso en cualquier momento, sin que ello genere sanción alguna, comunicándolo "
            "al profesional a cargo."
        ),
        minor_text=(
            "La participación del menor es voluntaria y se tendrá en cuenta su opinión según su "
            "edad y madurez. Como representante legal puedo retirar este consentimiento y dar "
            "por terminado el proceso en cualquier momento, sin que ello genere sanción alguna, "
            "comunicándolo al profesional a cargo."
        ),
    ),
    ClauseSpec(
        id="confidencialidad",
        title="Confidencialidad",
        adult_text=(
            "La información compartida durante las sesiones es confidencial y está protegida por "
            "el secreto profesional. Los registros del proceso se conservarán de forma segura y "
            "solo serán conocidos por el profesional a cargo."
        ),
        minor_text=(
            "La información compartida por el menor durante las sesiones es confidencial y está "
            "protegida por el secreto profesional. El representante legal recibirá información "
            "general sobre la evolución del proceso, preservando la intimidad del menor en todo "
            "aquello que no comprometa su integridad."
        ),
    ),
    ClauseSpec(
        id="limites_confidencialidad",
        title="Límites de la confidencialidad",
        adult_text=(
            "Entiendo que la confidencialidad podrá levantarse cuando exista riesgo grave para mi "
            "vida o integridad, o para la de terceros, o cuando una autoridad judicial lo ordene "
            "conforme a la ley."
        ),
        minor_text=(
            "Entiendo que la confidencialidad podrá levantarse cuando exista riesgo grave para la "
            "vida o integridad del menor o de terceros, cuando se conozcan situaciones de "
            "vulneración de sus derechos que deban ser reportadas a las autoridades competentes, "
            "o cuando una autoridad judicial lo ordene conforme a la ley."
        ),
    ),
    ClauseSpec(
        id="datos_personales",
        title="Tratamiento de datos personales",
        adult_text=(
            "Autorizo el tratamiento de mis datos personales, incluidos los datos sensibles "
            "relacionados con mi salud emocional, con la finalidad exclusiva de gestionar el "
            "proceso de orientación, conforme a la normativa vigente de protección de datos. "
            "Puedo conocer, actualizar, rectificar y solicitar la supresión de mis datos."
        ),
        minor_text=(
            "Autorizo el tratamiento de los datos personales del menor, incluidos los datos "
            "sensibles relacionados con su salud emocional, con la finalidad exclusiva de "
            "gestionar el proceso de orientación, respetando el interés superior del menor y la "
            "normativa vigente de protección de datos. Puedo conocer, actualizar, rectificar y "
            "solicitar la supresión de sus datos."
        ),
    ),
    ClauseSpec(
        id="modalidad_virtual",
        title="Sesiones virtuales",
        adult_text=(
            "Acepto que las sesiones puedan realizarse por medios virtuales. Me comprometo a "
            "disponer de un espacio privado y de una conexión adecuada, y entiendo que no está "
            "permitido grabar las sesiones sin el acuerdo previo de ambas partes."
        ),
    ),
    ClauseSpec(
        id="riesgos_beneficios",
        title="Beneficios y posibles molestias",
        adult_text=(
            "Comprendo que el proceso puede generar beneficios como una mayor comprensión de mis "
            "emociones y recursos personales, y que en algunos momentos puede producir malestar "
            "transitorio al abordar experiencias difíciles. El profesional no garantiza "
            "resultados específicos."
        ),
    ),
    ClauseSpec(
        id="honorarios",
        title="Honorarios y cancelaciones",
        adult_text=(
            "Conozco los honorarios acordados y la política de cancelación. Las sesiones "
            "canceladas con menos de veinticuatro horas de antelación podrán ser cobradas, salvo "
            "causa de fuerza mayor."
        ),
    ),
    ClauseSpec(
        id="declaracion",
        title="Declaración de consentimiento",
        adult_text=(
            "He leído y comprendido el contenido de este documento, he podido resolver mis dudas "
            "y, en consecuencia, otorgo mi consentimiento informado para iniciar el proceso de "
            "orientación. Firmo de manera digital con plena validez."
        ),
        minor_text=(
            "He leído y comprendido el contenido de este documento, he podido resolver mis dudas "
            "y, en calidad de representante legal, otorgo el consentimiento informado para que "
            "el menor inicie el proceso de orientación. Firmo de manera digital con plena validez."
        ),
    ),
)
