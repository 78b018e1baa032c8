"""
Reference codes for project document numbering and IT asset numbering.

Document number layout:
    {contract}-{type}-{discipline}-{location}.{work_system}-{serial}-{revision}
    e.g. 160-DWG-CIV-5.11-004-0
"""

DOCON_CONFIG = {
    "separator": "-",
    "serial_separator": ".",
    "serial_width": 3,
    "location_width": 2,
    "default_serial_start": 1,
    "exception_serial_start": 501,
    # Correspondence and periodic reports are numbered from 501.
    "exception_types": ("LET", "MOM", "RED", "REP", "REW", "REM", "RFC"),
}

CONTRACT_CODES = {
    "160": "Semua Area Proyek (Kecuali Jembatan)",
    "161": "Jembatan Loa Hulu",
    "162": "Jembatan Long Jo",
}

DOCUMENT_TYPES = {
    "AFM": {"desc": "Approval For Material", "start_number": 1},
    "BAL": {"desc": "Berita Acara Lapangan", "start_number": 1},
    "BAP": {"desc": "Berita Acara Pembayaran", "start_number": 1},
    "CAL": {"desc": "Calculation", "start_number": 1},
    "COM": {"desc": "Commercial", "start_number": 1},
    "DWG": {"desc": "Drawing", "start_number": 1},
    "EST": {"desc": "Estimate", "start_number": 1},
    "FAT": {"desc": "Final Acceptance Test", "start_number": 1},
    "ITP": {"desc": "Inspection Test Plan", "start_number": 1},
    "LET": {"desc": "Letter", "start_number": 501},
    "MOM": {"desc": "Minutes of Meeting", "start_number": 501},
    "PER": {"desc": "Permit", "start_number": 1},
    "PRE": {"desc": "Presentation", "start_number": 1},
    "RED": {"desc": "Report Daily", "start_number": 501},
    "REP": {"desc": "Report", "start_number": 501},
    "REW": {"desc": "Report Weekly", "start_number": 501},
    "REM": {"desc": "Report Monthly", "start_number": 501},
    "RFA": {"desc": "Request For Approval", "start_number": 1},
    "RFC": {"desc": "Report Fuel Consumption", "start_number": 501},
    "RFI": {"desc": "Request For Information", "start_number": 1},
    "RFQ": {"desc": "Request For Quotation", "start_number": 1},
    "RFW": {"desc": "Request For Work", "start_number": 1},
    "SCH": {"desc": "Schedule", "start_number": 1},
    "SOW": {"desc": "Scope of Work", "start_number": 1},
    "SPE": {"desc": "Specification", "start_number": 1},
    "TEV": {"desc": "Technical Evaluation", "start_number": 1},
    "WMS": {"desc": "Work Method Statement", "start_number": 1},
    "SOP": {"desc": "Standar Operational Procedure", "start_number": 1},
    "INK": {"desc": "Instruksi Kerja", "start_number": 1},
    "MKD": {"desc": "Manual Keadaan Darurat", "start_number": 1},
    "INT": {"desc": "Internal Memo", "start_number": 1},
    "IBPR": {"desc": "Identifikasi Bahaya dan Penilaian Resiko", "start_number": 1},
}

DISCIPLINES = {
    "ARC": "Architectural, Landscaping",
    "CIV": "Civil",
    "CTR": "Instrumentation & Control",
    "GEN": "General",
    "GEO": "Geotechnical",
    "MEP": "Mechanical, Electrical, Plumbing",
    "STR": "Structural",
    "TEL": "Telecommunication",
    "HYD": "Hydrology",
}

LOCATIONS = {
    "01": {"desc": "General", "sta": "-"},
    "05": {"desc": "Section 1", "sta": "90+335 - 115+000"},
    "07": {"desc": "Section 2", "sta": "115+000 - 126+425"},
}

WORK_SYSTEM_RANGES = {
    "general": {"range": (1, 9), "desc": "Work Detail of General"},
    "civil_arch": {"range": (11, 19), "desc": "Work Detail of Civil, Architecture, Landscape"},
    "struct_inst": {"range": (21, 29), "desc": "Work Detail of Structure, Instrument & Control"},
    "mep": {"range": (31, 39), "desc": "Work Detail of Mechanical, Electrical, Plumbing"},
    "qc": {"range": (41, 49), "desc": "Work Detail of Quality Control"},
    "spare1": {"range": (51, 59), "desc": "Spare 1"},
    "spare2": {"range": (61, 69), "desc": "Spare 2"},
    "spare3": {"range": (71, 79), "desc": "Spare 3"},
    "spare4": {"range": (81, 89), "desc": "Spare 4"},
    "spare5": {"range": (91, 99), "desc": "Spare 5"},
}

SUBMISSION_STATUS = ("Draft", "Submitted", "Received", "Distributed", "Closed")

DOCUMENT_WORKFLOW_STATUS = {
    "IFA": "Issued For Approval",
    "IFC": "Issued For Construction",
    "IFI": "Issued For Information",
    "ABT": "As-Built",
}

REVISION_REVIEW_CODES = {
    "A": "Approved (No Comments)",
    "B": "Approved with Comments",
    "C": "Revise & Resubmit",
    "D": "Rejected",
}

FILE_CATEGORIES = ("current", "previous", "attachment")

# --- IT ASSETS ---
IT_ASSET_CONFIG = {
    # Only numbers generated from the template take part in allocation;
    # manually entered numbers such as HO-LAPTOP-001 are ignored.
    "template_prefix": "LMA.1B/IT",
    "serial_width": 3,
    "location_width": 2,
}

IT_ASSET_CATEGORIES = {
    "Laptop": "NB",
    "Storage": "SR",
    "Printer": "PR",
    "Dokumentasi": "DKV",
    "Other": "OT",
}


def reference_catalog() -> dict:
    return {
        "config": {
            **DOCON_CONFIG,
            "exception_types": list(DOCON_CONFIG["exception_types"]),
        },
        "contract_codes": CONTRACT_CODES,
        "document_types": DOCUMENT_TYPES,
        "disciplines": DISCIPLINES,
        "locations": LOCATIONS,
        "work_system_ranges": {
            key: {"range": list(value["range"]), "desc": value["desc"]}
            for key, value in WORK_SYSTEM_RANGES.items()
        },
        "submission_status": list(SUBMISSION_STATUS),
        "document_workflow_status": DOCUMENT_WORKFLOW_STATUS,
        "revision_review_codes": REVISION_REVIEW_CODES,
        "file_categories": list(FILE_CATEGORIES),
        "it_asset_categories": IT_ASSET_CATEGORIES,
    }
