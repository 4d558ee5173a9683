"""Localized reply templates.

Keyed by category then language. Placeholders: ``{priority}`` (localized
label) and ``{detail}`` (optional sentence, may be empty).
"""

from __future__ import annotations

from sevalink.models import Category, Language, Priority, ServiceType

EN, HI, TE = Language.ENGLISH, Language.HINDI, Language.TELUGU

PRIORITY_LABELS: dict[Language, dict[Priority, str]] = {
    EN: {
        Priority.LOW: "low",
        Priority.MEDIUM: "medium",
        Priority.HIGH: "high",
        Priority.URGENT: "urgent",
    },
    HI: {
        Priority.LOW: "कम",
        Priority.MEDIUM: "मध्यम",
        Priority.HIGH: "उच्च",
        Priority.URGENT: "अत्यावश्यक",
    },
    TE: {
        Priority.LOW: "తక్కువ",
        Priority.MEDIUM: "మధ్యస్థ",
        Priority.HIGH: "అధిక",
        Priority.URGENT: "అత్యవసర",
    },
}

REPLIES: dict[Category, dict[Language, str]] = {
    Category.BLOOD_REQUEST: {
        EN: (
            "Thank you for your blood donation request. {detail}"
            "Your request has been categorized as a {priority} priority blood request "
            "and will be shared with our volunteer donors immediately."
        ),
        HI: (
            "रक्तदान अनुरोध के लिए धन्यवाद। {detail}"
            "आपका अनुरोध {priority} प्राथमिकता के रक्त अनुरोध के रूप में दर्ज किया गया है "
            "और तुरंत हमारे स्वयंसेवक दाताओं के साथ साझा किया जाएगा।"
        ),
        TE: (
            "మీ రక్తదాన అభ్యర్థనకు ధన్యవాదాలు. {detail}"
            "మీ అభ్యర్థన {priority} ప్రాధాన్యత రక్త అభ్యర్థనగా నమోదు చేయబడింది "
            "మరియు వెంటనే మా స్వచ్ఛంద దాతలతో పంచుకోబడుతుంది."
        ),
    },
    Category.ELDER_SUPPORT: {
        EN: (
            "Thank you for reaching out about elder care support. {detail}"
            "Your elder support request has been marked as {priority} priority "
            "and our volunteers will be notified."
        ),
        HI: (
            "बुजुर्ग देखभाल सहायता के लिए संपर्क करने का धन्यवाद। {detail}"
            "आपका अनुरोध {priority} प्राथमिकता के रूप में दर्ज किया गया है "
            "और हमारे स्वयंसेवकों को सूचित किया जाएगा।"
        ),
        TE: (
            "వృద్ధుల సంరక్షణ సహాయం కోసం సంప్రదించినందుకు ధన్యవాదాలు. {detail}"
            "మీ అభ్యర్థన {priority} ప్రాధాన్యతగా నమోదు చేయబడింది "
            "మరియు మా స్వచ్ఛంద సేవకులకు తెలియజేయబడుతుంది."
        ),
    },
    Category.COMPLAINT: {
        EN: (
            "Thank you for bringing this issue to our attention. {detail}"
            "Your complaint has been registered with {priority} priority and will be "
            "forwarded to the appropriate authorities for resolution."
        ),
        HI: (
            "इस समस्या की जानकारी देने के लिए धन्यवाद। {detail}"
            "आपकी शिकायत {priority} प्राथमिकता के साथ दर्ज की गई है और समाधान के लिए "
            "संबंधित अधिकारियों को भेजी जाएगी।"
        ),
        TE: (
            "ఈ సమస్యను మా దృష్టికి తీసుకువచ్చినందుకు ధన్యవాదాలు. {detail}"
            "మీ ఫిర్యాదు {priority} ప్రాధాన్యతతో నమోదు చేయబడింది మరియు పరిష్కారం కోసం "
            "సంబంధిత అధికారులకు పంపబడుతుంది."
        ),
    },
    Category.EMERGENCY: {
        EN: (
            "EMERGENCY REQUEST RECEIVED. {detail}Your request has been marked as URGENT "
            "and emergency volunteers are being notified now. For life-threatening "
            "emergencies, please also call 108 (ambulance) or 112 (emergency services)."
        ),
        HI: (
            "आपातकालीन अनुरोध प्राप्त हुआ। {detail}आपका अनुरोध अत्यावश्यक के रूप में दर्ज किया "
            "गया है और आपातकालीन स्वयंसेवकों को अभी सूचित किया जा रहा है। जानलेवा स्थिति में "
            "कृपया 108 (एम्बुलेंस) या 112 (आपातकालीन सेवाएं) पर भी कॉल करें।"
        ),
        TE: (
            "అత్యవసర అభ్యర్థన అందింది. {detail}మీ అభ్యర్థన అత్యవసరంగా నమోదు చేయబడింది మరియు "
            "అత్యవసర స్వచ్ఛంద సేవకులకు ఇప్పుడే తెలియజేయబడుతోంది. ప్రాణాపాయ పరిస్థితిలో "
            "దయచేసి 108 (అంబులెన్స్) లేదా 112 (అత్యవసర సేవలు)కు కూడా కాల్ చేయండి."
        ),
    },
    Category.GENERAL_INQUIRY: {
        EN: (
            "I'd be happy to help. I work best with community service requests like "
            "blood donations, elder support and complaints. {detail}"
            "Is there anything specific I can help you with?"
        ),
        HI: (
            "मुझे मदद करने में खुशी होगी। मैं रक्तदान, बुजुर्ग सहायता और शिकायतों जैसे "
            "सामुदायिक सेवा अनुरोधों में सबसे अच्छी मदद कर सकता हूं। {detail}"
            "मैं आपकी किस प्रकार सहायता कर सकता हूं?"
        ),
        TE: (
            "సహాయం చేయడానికి సంతోషిస్తాను. రక్తదానం, వృద్ధుల సహాయం మరియు ఫిర్యాదుల వంటి "
            "సమాజ సేవా అభ్యర్థనలలో నేను బాగా సహాయపడగలను. {detail}"
            "నేను మీకు ఎలా సహాయం చేయగలను?"
        ),
    },
}

BLOOD_TYPE_DETAIL: dict[Language, str] = {
    EN: "I understand you need {blood_type} blood. ",
    HI: "आपको {blood_type} रक्त की आवश्यकता है। ",
    TE: "మీకు {blood_type} రక్తం అవసరం. ",
}

URGENT_DETAIL: dict[Language, str] = {
    EN: "I can see this is urgent. ",
    HI: "हम समझते हैं कि यह अत्यावश्यक है। ",
    TE: "ఇది అత్యవసరమని అర్థమైంది. ",
}

SERVICE_DETAIL: dict[Language, dict[ServiceType, str]] = {
    EN: {
        ServiceType.MEDICINE_DELIVERY: "I understand you need help with medication. ",
        ServiceType.GROCERY_SHOPPING: "I see you need assistance with grocery shopping. ",
        ServiceType.MEDICAL_APPOINTMENT: "I see you need help getting to a medical appointment. ",
        ServiceType.HOUSEHOLD_HELP: "I understand you need help around the house. ",
        ServiceType.COMPANIONSHIP: "I understand you would like some company. ",
    },
    HI: {
        ServiceType.MEDICINE_DELIVERY: "आपको दवाई में मदद चाहिए। ",
        ServiceType.GROCERY_SHOPPING: "आपको किराना खरीदारी में मदद चाहिए। ",
    },
    TE: {
        ServiceType.MEDICINE_DELIVERY: "మీకు మందుల విషయంలో సహాయం కావాలి. ",
        ServiceType.GROCERY_SHOPPING: "మీకు కిరాణా కొనుగోలులో సహాయం కావాలి. ",
    },
}

COMPLAINT_DETAIL: dict[Language, str] = {
    EN: "I understand this is a {complaint_category} issue. ",
}

# --- General inquiry replies ---

GREETING: dict[Language, str] = {
    EN: (
        "Hello! I'm your SevaLink AI assistant. I can answer questions, help with "
        "information, or assist with community services. What would you like to know?"
    ),
    HI: (
        "नमस्ते! मैं आपका सेवालिंक सहायक हूं। मैं रक्तदान, बुजुर्ग सहायता और शिकायतों में "
        "आपकी मदद कर सकता हूं। आप क्या जानना चाहेंगे?"
    ),
    TE: (
        "నమస్కారం! నేను మీ సేవాలింక్ సహాయకుడిని. రక్తదానం, వృద్ధుల సహాయం మరియు "
        "ఫిర్యాదులలో మీకు సహాయం చేయగలను. మీకు ఏమి కావాలి?"
    ),
}

THANKS: dict[Language, str] = {
    EN: "You're welcome! Let me know if there is anything else I can help with.",
    HI: "आपका स्वागत है! किसी और मदद की जरूरत हो तो बताइए।",
    TE: "స్వాగతం! ఇంకేమైనా సహాయం కావాలంటే చెప్పండి.",
}

CAPABILITIES: dict[Language, str] = {
    EN: (
        "I can help you request blood donors, arrange support for elderly family "
        "members (medicine, groceries, appointments) and register civic complaints "
        "such as broken street lights, potholes or water problems. Just describe "
        "what you need in English, Hindi or Telugu."
    ),
    HI: (
        "मैं रक्तदाता खोजने, बुजुर्गों के लिए सहायता (दवाई, किराना, अपॉइंटमेंट) और "
        "स्ट्रीट लाइट, गड्ढे या पानी जैसी शिकायतें दर्ज करने में मदद कर सकता हूं।"
    ),
    TE: (
        "రక్తదాతలను కనుగొనడం, వృద్ధులకు సహాయం (మందులు, కిరాణా, అపాయింట్‌మెంట్లు) మరియు "
        "వీధి దీపాలు, గుంతలు లేదా నీటి సమస్యల వంటి ఫిర్యాదులను నమోదు చేయడంలో నేను సహాయం చేయగలను."
    ),
}

FEVER_INFO = (
    "Fever is your body's natural response to infection or illness. Normal body "
    "temperature is around 98.6°F (37°C); a fever is generally 100.4°F (38°C) or "
    "higher. Stay hydrated, rest, and see a doctor if the fever persists over 3 "
    "days or is very high."
)

HEALTH_CAUTION: dict[Language, str] = {
    EN: (
        "While I can provide general information, it's always best to consult a "
        "healthcare professional for medical advice. If you're experiencing "
        "concerning symptoms, please consider seeing a doctor."
    ),
    HI: "सामान्य जानकारी दी जा सकती है, लेकिन चिकित्सा सलाह के लिए कृपया डॉक्टर से परामर्श करें।",
    TE: "సాధారణ సమాచారం ఇవ్వగలను, కానీ వైద్య సలహా కోసం దయచేసి డాక్టర్‌ను సంప్రదించండి.",
}

MATH_UNSUPPORTED = "I can help with simple math! Could you rephrase your calculation?"
