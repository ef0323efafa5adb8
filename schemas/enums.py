from enum import Enum


class LoanPurpose(str, Enum):
    URGENCE = "urgence"
    TRAVAUX = "travaux"
    VOYAGE = "voyage"
    EQUIPEMENT = "equipement"
    AUTRE = "autre"


class EmploymentStatus(str, Enum):
    CDI = "cdi"
    CDD = "cdd"
    INTERIM = "interim"
    FREELANCE = "freelance"
    RETRAITE = "retraite"
    ETUDIANT = "etudiant"
    CHOMAGE = "chomage"


class IncomeBracket(str, Enum):
    FROM_1000_TO_1500 = "1000-1500"
    FROM_1500_TO_2000 = "1500-2000"
    FROM_2000_TO_3000 = "2000-3000"
    OVER_3000 = "3000+"


class ApplicationStatus(str, Enum):
    PENDING = "pending"
    STEP1 = "step1"
    STEP2 = "step2"
    STEP3 = "step3"
    STEP4 = "step4"
    STEP5 = "step5"
    STEP6 = "step6"
    STEP7 = "step7"
    COMPLETED = "completed"
    APPROVED = "approved"
    REJECTED = "rejected"


class LenderDecision(str, Enum):
    APPROVED = "approved"
    REJECTED = "rejected"
